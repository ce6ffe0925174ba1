"""Core of jiratui: domain model, view state machine, dispatcher and controller."""
