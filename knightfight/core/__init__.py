"""Engine-level building blocks.

This package contains the domain-free pieces the combat rules are built on:
- data/: enums and value types shared across the engine
- events/: publisher-subscriber event bus and event definitions
- engine/: animation clock, physics integration and deferred task scheduling
- config.py: match configuration objects and YAML loading
"""
