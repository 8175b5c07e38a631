"""Natural-language query sent to the AI search provider."""

_QUERY_TEMPLATE = """
Find the top {limit} universities worldwide for {degree} degree.
For each university, provide detailed information in a structured format:

1. University name and country
2. Post-Study Work visa duration and specific requirements for international students
3. Industry hub relevance - how {degree} matches the country's economy and major employers
4. Graduate employability statistics - employment rate and average starting salary
5. Hidden costs - health insurance, visa fees, and proof of funds requirements
6. Scholarship availability - distinguish between full-ride scholarships (rare) and tuition waivers (common)
7. Accreditation bodies - list relevant global accreditation (e.g., AACSB for Business, ABET for Engineering)

Please provide specific, factual data with sources where possible.
"""


def build_search_query(degree: str, limit: int = 30) -> str:
    """Build the provider query for a degree.

    Args:
        degree: Validated degree name
        limit: Number of universities to ask for

    Returns:
        Query text
    """
    return _QUERY_TEMPLATE.format(degree=degree, limit=limit)
