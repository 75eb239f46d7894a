"""
Stage classifier: maps the free-text tracker status to a bidding stage.

Checks run in this order and the first hit wins, so "LOA issued, COD
achieved" is COD:
  empty / "not applicable" → NA
  contains "cod"           → COD
  contains "ppa"           → PPA
  contains "loa"           → LOA
  contains "e-ra"/"era"/"e ra" → e-RA
  anything else            → NA
"""

from ingest.coercion import trim_text

STAGE_ERA = "e-RA"
STAGE_LOA = "LOA"
STAGE_PPA = "PPA"
STAGE_COD = "COD"
STAGE_NA  = "NA"

# Pipeline order, earliest first
STAGES = (STAGE_ERA, STAGE_LOA, STAGE_PPA, STAGE_COD, STAGE_NA)

_RULES = (
    (STAGE_COD, ("cod",)),
    (STAGE_PPA, ("ppa",)),
    (STAGE_LOA, ("loa",)),
    (STAGE_ERA, ("e-ra", "era", "e ra")),
)


def derive_stage(status_raw: str) -> str:
    status = trim_text(status_raw).lower()
    if not status or status == "not applicable":
        return STAGE_NA
    for stage, needles in _RULES:
        if any(needle in status for needle in needles):
            return stage
    return STAGE_NA
