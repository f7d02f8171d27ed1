"""Connection handling: version gating, session registry and signal relay."""
