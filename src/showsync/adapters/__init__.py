"""Adapters translating between the outside world and the showsync domain."""
