"""Run services: request executor and dispatch loop."""
