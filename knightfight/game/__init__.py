"""Fight simulation components.

- fighter.py: combat/animation state machine for one combatant
- combat_resolver.py: hit resolution
- match.py: match context, controller and round progression
- input_handler.py: routes input commands to the controlled fighter
- log_manager.py: collects log events for display
- ai/: decision engines for autonomous fighters
"""
