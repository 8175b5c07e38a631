"""Parser turning a provider answer into university results.

The provider answer is free text. Until structured extraction is built,
``parse`` ignores the answer and returns a fixed reference catalog so the
rest of the pipeline (cache, ranking, API) can run end to end.
"""

from collections.abc import Callable
from datetime import datetime

import structlog

from src.domain.entities.university import UniversityResult
from src.shared.utils.timezone import now_utc

logger = structlog.get_logger(__name__)

_REFERENCE_CATALOG: list[dict] = [
    {
        "university_name": "Massachusetts Institute of Technology",
        "country": "USA",
        "ranking": 1,
        "psw_duration": "3 years (STEM OPT extension)",
        "psw_details": (
            "Optional Practical Training (OPT) allows 12 months + 24 months "
            "STEM extension"
        ),
        "industry_match": "Silicon Valley tech hub, Boston biotech corridor",
        "major_employers": ["Google", "Microsoft", "Apple", "Amazon", "Meta"],
        "employability_rank": 1,
        "graduate_employment_rate": "95% within 6 months",
        "avg_starting_salary": "$120,000 - $150,000",
        "health_insurance": "$3,000 - $4,000 per year",
        "visa_fees": "$510 (SEVIS $350 + Visa $160)",
        "proof_of_funds": "$60,000 - $75,000",
        "full_ride_available": False,
        "full_ride_details": "Extremely rare, only for exceptional candidates",
        "tuition_waiver_available": True,
        "tuition_waiver_details": "TA/RA positions available covering tuition + stipend",
        "accreditation_bodies": ["ABET", "NEASC"],
        "accreditation_details": "ABET accredited engineering programs",
    },
    {
        "university_name": "Stanford University",
        "country": "USA",
        "ranking": 2,
        "psw_duration": "3 years (STEM OPT extension)",
        "psw_details": "OPT 12 months + 24 months STEM extension available",
        "industry_match": "Heart of Silicon Valley, venture capital hub",
        "major_employers": ["Google", "Apple", "Netflix", "Tesla", "NVIDIA"],
        "employability_rank": 2,
        "graduate_employment_rate": "94% within 6 months",
        "avg_starting_salary": "$125,000 - $160,000",
        "health_insurance": "$3,200 per year",
        "visa_fees": "$510",
        "proof_of_funds": "$70,000 - $80,000",
        "full_ride_available": False,
        "full_ride_details": "Need-based aid available but full rides rare",
        "tuition_waiver_available": True,
        "tuition_waiver_details": "Graduate assistantships available",
        "accreditation_bodies": ["ABET", "WASC"],
        "accreditation_details": "WASC Senior College and University Commission",
    },
    {
        "university_name": "University of Cambridge",
        "country": "UK",
        "ranking": 3,
        "psw_duration": "2 years (Graduate Route)",
        "psw_details": (
            "Graduate Route visa allows 2 years work post-PhD, 2 years for Masters"
        ),
        "industry_match": "London finance hub, Cambridge tech cluster",
        "major_employers": ["HSBC", "BP", "GSK", "Rolls-Royce", "ARM"],
        "employability_rank": 3,
        "graduate_employment_rate": "92% within 6 months",
        "avg_starting_salary": "£35,000 - £50,000",
        "health_insurance": "NHS surcharge £470/year",
        "visa_fees": "£490 visa + £470 NHS/year",
        "proof_of_funds": "£12,000 - £15,000",
        "full_ride_available": True,
        "full_ride_details": "Gates Cambridge, Commonwealth Scholarships available",
        "tuition_waiver_available": True,
        "tuition_waiver_details": "Various college-specific scholarships",
        "accreditation_bodies": ["QAA", "Engineering Council"],
        "accreditation_details": "UK QAA quality assured",
    },
]


class UniversityResponseParser:
    """Maps a provider answer to ranked ``UniversityResult`` objects."""

    def __init__(self, clock: Callable[[], datetime] = now_utc):
        self._clock = clock

    def parse(self, answer: str, degree: str) -> list[UniversityResult]:
        """Parse a provider answer.

        Args:
            answer: Free-text answer from the provider (currently unused)
            degree: Degree the answer is about

        Returns:
            Ranked results with ids ``uni-0``, ``uni-1``, ...
        """
        fetched_at = self._clock()
        logger.debug(
            "parsing_provider_answer",
            degree=degree,
            answer_length=len(answer),
        )
        return [
            UniversityResult(id=f"uni-{index}", cached_at=fetched_at, **university)
            for index, university in enumerate(_REFERENCE_CATALOG)
        ]
