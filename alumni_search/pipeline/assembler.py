"""Render a SearchOutcome as a WhatsApp-style text message."""

from alumni_search.core.schemas import ErrorKind, RankedResult, SearchOutcome

SEPARATOR = "\n---------------\n\n"
EXAMPLE_QUERY = "Find web developers in Pune"
MAX_REASONS = 3


def format_outcome(outcome: SearchOutcome) -> str:
    """Build the reply text for a search outcome.

    *bold* and _italic_ follow WhatsApp markup.
    """
    if outcome.error == ErrorKind.NO_SESSION_FOUND:
        return (
            "No previous search found. Please make a new search first.\n\n"
            f"Example: *{EXAMPLE_QUERY}*"
        )
    if outcome.error == ErrorKind.STORE_UNAVAILABLE:
        return "The alumni directory is unavailable right now. Please try again in a minute."
    if outcome.exhausted and not outcome.results:
        return (
            "No more results for your last search.\n\n"
            "Try a different search or modify your criteria."
        )
    if not outcome.results:
        summary = outcome.intent_summary.summary()
        message = f"I couldn't find any alumni for *{outcome.query}*."
        if summary != "(empty)":
            message += f"\n_Searched for: {summary}_"
        return message + "\n\nTry broader terms, e.g. a skill or a city."

    return _headline(outcome) + SEPARATOR.join(_cards(outcome)) + _footer(outcome)


def format_profile(result: RankedResult, position: int) -> str:
    """One numbered profile card."""
    profile = result.profile
    lines = [f"*{position}. {profile.display_name}*"]

    professional = profile.professional
    title = professional.current_title or professional.professional_role or professional.headline
    if title and professional.current_company:
        lines.append(f"{title} at {professional.current_company}")
    elif title or professional.current_company:
        lines.append(title or professional.current_company)

    if profile.location.display:
        lines.append(f"Location: {profile.location.display}")
    if result.match_reasons:
        lines.append(f"_Why: {'; '.join(result.match_reasons[:MAX_REASONS])}_")
    if profile.contact.linkedin:
        lines.append(f"LinkedIn: {profile.contact.linkedin}")
    return "\n".join(lines) + "\n"


def _headline(outcome: SearchOutcome) -> str:
    count = len(outcome.results)
    shown = outcome.total_results - outcome.remaining
    if outcome.follow_up:
        headline = f"*Showing {count} more* ({shown} of {outcome.total_results} total)\n\n"
    else:
        noun = "alumnus" if outcome.total_results == 1 else "alumni"
        headline = f"*Found {outcome.total_results} {noun}* for _{outcome.query}_\n\n"
    if not outcome.results[0].exact:
        headline += "_No exact matches. These related profiles may still help:_\n\n"
    return headline


def _cards(outcome: SearchOutcome) -> list[str]:
    first = outcome.total_results - outcome.remaining - len(outcome.results) + 1
    return [format_profile(r, first + i) for i, r in enumerate(outcome.results)]


def _footer(outcome: SearchOutcome) -> str:
    remaining = outcome.remaining
    if remaining > 0:
        noun = "result" if remaining == 1 else "results"
        return f'\n_Reply *"more"* to see {remaining} more {noun}_'
    if outcome.follow_up:
        return "\n_That's all the results. Try a new search!_"
    return ""
