"""PR Manager - reviewer assignment and pull request lifecycle service.

This package tracks teams, their members and pull requests, and assigns
code reviewers from the author's team according to membership and
availability rules.
"""

__version__ = "0.1.0"
