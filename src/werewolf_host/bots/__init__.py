"""Bots package - stub players for simulation and tests."""

from werewolf_host.bots.stub_bot import StubBot

__all__ = ["StubBot"]
