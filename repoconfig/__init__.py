"""Resolve plan/apply step pipelines from a repo's atlantis.yaml.

Common entrypoints:

- `repoconfig.framework.reader.Reader`: config loading + stage resolution
- `repoconfig.cli`: `python -m repoconfig validate|plan|apply|list-steps`

For the reusable strict config reader and step registry, use `stepkit`.
"""
