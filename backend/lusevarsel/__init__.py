"""LuseVarsel — sea lice risk scoring for Norwegian aquaculture sites."""

__version__ = "0.1.0"
