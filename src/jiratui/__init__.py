"""jiratui: browse sprints, backlog and issues of a Jira board from the terminal."""

__version__ = "0.1.0"
