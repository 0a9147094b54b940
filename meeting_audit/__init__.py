"""Meeting audit: flag organized meetings nobody has confirmed yet.

Scans the upcoming calendar window, keeps events the user organized where no
invitee accepted or tentatively accepted, and emails a summary report.
"""

__version__ = "0.1.0"
