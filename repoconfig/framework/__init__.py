"""Schema, resolver and execution contracts for repo-level stage configuration.

- `repoconfig.framework.config`: the `atlantis.yaml` schema and its validation
- `repoconfig.framework.reader`: stage resolution (defaults, project and workflow lookup)
- `repoconfig.framework.meta`: the shared step execution context
- `repoconfig.framework.stages`: plan/apply stage containers

Concrete step kinds live in `repoconfig.steps`.
"""
