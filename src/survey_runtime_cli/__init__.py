"""survey_runtime_cli — run a survey document interactively in a terminal."""
