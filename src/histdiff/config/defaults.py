"""Starter .histdiff.toml template."""

DEFAULT_TOML = """\
# histdiff configuration
version = "1.0"

[display]
short_hash_length = 7     # abbreviated commit hash length in titles and tables

[diff]
context_lines = 3
preview = true

[viewer]
mode = "terminal"         # terminal | external
diff_command = "code --wait --diff $LOCAL $REMOTE"   # $LOCAL $REMOTE $TITLE

[git]
timeout = 30              # seconds per git command

[history]
limit = 50
"""
