"""Services Layer — orchestration around the pure core.

Invariants:
    - Services may log; core/ never does
    - Routes call services, services call core (never the other way round)

Design Decisions:
    - One module per concern: stateful builder vs. request translation
"""
