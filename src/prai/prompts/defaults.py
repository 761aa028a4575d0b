"""
Built-in prompt fragments used when neither the CLI nor the profile
overrides them.

- Role: who the model should act as
- Directive: what to produce (full description, or title only)
- Template: the PR description skeleton
"""

# =============================================================================
# ROLE
# =============================================================================

DEFAULT_ROLE = "You are a senior engineer"


# =============================================================================
# DIRECTIVES
# =============================================================================
# The description directive is the default; title mode swaps in the second one.
# =============================================================================

DEFAULT_DIRECTIVE = """Analyze this git diff and create a concise PR description. Focus on:
- What changes were made (be specific but brief)
- Why these changes matter
- Any breaking changes or important notes
Keep it under 150 words and use bullet points for clarity. Don't include implementation details unless critical.
Don't include your own thought process. The output should be just the content of the PR summary."""

DEFAULT_TITLE_DIRECTIVE = """Analyze this git diff and write a title for the pull request.
- One line, under 72 characters
- Imperative mood (e.g. "Add", "Fix", "Remove")
- Describe the overall change, not individual files
Don't include your own thought process, quotes or a trailing period. The output should be just the title."""


# =============================================================================
# PR TEMPLATE
# =============================================================================

DEFAULT_TEMPLATE = """## Summary
<one or two sentences on what this PR does>

## Changes
- <change>

## Breaking Changes
<none, or what callers must update>

## Notes
<anything reviewers should know>"""
