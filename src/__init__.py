"""cropwatch: crop photo analysis and re-capture scheduling."""
