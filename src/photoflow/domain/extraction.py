"""Models for project details extracted from free-form text."""

import datetime as dt

from photoflow.domain.models import CamelModel


class ProjectDetails(CamelModel):
    """Suggested fields for a new project; advisory only."""

    client_name: str
    date: str
    location: str
    photographer: str

    def parsed_date(self) -> dt.date | None:
        """Return the date when it is an ISO calendar date, else None."""
        try:
            return dt.date.fromisoformat(self.date.split("T", 1)[0])
        except ValueError:
            return None
