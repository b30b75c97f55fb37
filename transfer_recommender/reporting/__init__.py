"""
transfer_recommender.reporting — terminal formatting and flat-file export
of ranked transfer recommendations.

Modules:
  formatters — plain-text summaries for Typer CLI commands.
  export     — CSV/JSON export helpers.
"""
