"""
Core engine for Button Men.

- die: the mutable game piece
- game: players, rosters and the game-state predicate
- hooks: skill registry and hook dispatcher
- registry: attack type registry and the static registries
- resolver: attack life cycle (validate, apply, capture, record)
- engine: RulesEngine facade used by callers
"""
