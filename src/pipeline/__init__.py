"""Pipeline modules — orchestration layer for the site build.

Each sub-module handles one build step:
  sections      — content section → listings, tags, TOCs, widgets, feeds
  shows         — video catalog → latest-show fragments and show feeds
  announcement  — global banner → every _project.yaml
  build         — runs the steps concurrently and collects failures

Every entry point takes an explicit ``BuildContext`` (config, view
primitives, failure report) rather than reading global state.
"""
