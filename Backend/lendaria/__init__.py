"""Lendária talent backend."""
