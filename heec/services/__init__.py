"""Administrative operations exposed to the API and the CLI.

Every function returns an :class:`~heec.results.ActionResult`. Mutations take
the acting user's id first, fail closed when that user is not an
administrator, and append an activity entry once the write is committed.
"""
