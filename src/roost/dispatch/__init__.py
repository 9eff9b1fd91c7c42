"""Dispatch: handler resolution, invocation, and dispatch results."""
