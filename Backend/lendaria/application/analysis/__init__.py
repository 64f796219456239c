from lendaria.application.analysis.talent_analysis import (
    JobMatch,
    analyze_cultural_fit,
    analyze_job_match,
    build_cultural_fit_prompt,
    build_job_match_prompt,
    parse_job_matches,
    strip_code_fences,
)

__all__ = [
    "JobMatch",
    "analyze_cultural_fit",
    "analyze_job_match",
    "build_cultural_fit_prompt",
    "build_job_match_prompt",
    "parse_job_matches",
    "strip_code_fences",
]
