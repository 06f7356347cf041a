"""
System prompts and user-prompt builders for the optimization pipeline stages.

Every stage asks for a single JSON object; the shapes described here are the
ones validated by stage_schemas.
"""

import json
from typing import Any, Dict, List

from boron.contexts.profile.profile_data_structure import Profile
from boron.contexts.targeting.stage_schemas import JobAnalysis, MatchAnalysis

ANALYZER_SYSTEM_PROMPT = """You are an expert technical recruiter and ATS specialist.
Analyze the job description and extract every requirement a resume should address.

Return a single JSON object with exactly this structure:
{
  "technicalSkills": {"required": [], "preferred": [], "niceToHave": []},
  "softSkills": [],
  "experienceLevel": {"years": "", "level": "", "specificRequirements": []},
  "keyResponsibilities": [],
  "industryTerms": [],
  "projectTypes": [],
  "methodologies": [],
  "metrics": [],
  "teamRequirements": [],
  "education": [],
  "certifications": [],
  "companyValues": [],
  "atsKeywords": [],
  "priority": {"mustHave": [], "shouldHave": [], "couldHave": []}
}

Use the employer's exact wording for skills and keywords. Do not invent requirements."""

MATCHER_SYSTEM_PROMPT = """You are a career strategist comparing a candidate profile with an analyzed job.
Score the fit and identify what the resume should emphasize, reframe or quantify.

Return a single JSON object with exactly this structure:
{
  "matchScore": 0,
  "strengths": {"directMatches": [], "experienceAlignments": [], "projectSimilarities": [], "educationFit": []},
  "gaps": {"criticalMissing": [], "preferredMissing": [], "experienceGaps": []},
  "hiddenStrengths": [],
  "optimizationOpportunities": {"emphasizeMore": [], "reframe": [], "quantify": []},
  "competitiveAdvantages": [],
  "recommendations": {"priorityFocus": [], "skillsToHighlight": [], "experienceToEmphasize": [], "gapsToAddress": []}
}

matchScore is a number from 0 to 100. Be honest about gaps."""

EXPERIENCE_SYSTEM_PROMPT = """You are an expert resume writer optimizing work experience for a specific job.
Rewrite each experience's bullet points to surface the job's keywords and the candidate's impact.

Rules:
- Keep every fact truthful; never invent employers, titles, dates or numbers.
- Start each bullet with a strong action verb; quantify where the source supports it.
- Use 3-5 bullets per role, one sentence each, no bullet symbols.
- Keep title, company, location and dates exactly as given.

Return a single JSON object with exactly this structure:
{
  "optimizedExperience": [
    {
      "title": "", "company": "", "location": "", "startDate": "", "endDate": "",
      "highlights": [],
      "optimizationNotes": {"keywordsAdded": [], "metricsEnhanced": [], "relevanceScore": 0}
    }
  ],
  "overallStrategy": ""
}"""

SKILLS_SYSTEM_PROMPT = """You are an ATS optimization specialist organizing a candidate's skills for a specific job.
Group the skills into clear categories, ordered by relevance to the job, most relevant first.

Rules:
- Only include skills the candidate actually has, using the job's spelling where they match.
- Drop skills that are irrelevant to the role.
- Use 3-6 categories with short names (e.g., "Languages", "Cloud & DevOps").

Return a single JSON object with exactly this structure:
{
  "optimizedSkills": {"Category": ["Skill"]},
  "optimizationNotes": {"prioritizedSkills": [], "addedKeywords": [], "removedIrrelevant": [], "relevanceScore": 0},
  "recommendations": []
}"""

PROJECTS_SYSTEM_PROMPT = """You are a technical resume writer optimizing project descriptions for a specific job.
Select the projects most relevant to the job and rewrite their bullet points to highlight matching technologies and outcomes.

Rules:
- Keep every fact truthful; keep titles, dates and URLs exactly as given.
- Use 2-4 bullets per project, one sentence each, no bullet symbols.
- Order projects by relevance, most relevant first.

Return a single JSON object with exactly this structure:
{
  "optimizedProjects": [
    {
      "title": "", "startDate": "", "endDate": "", "projectUrl": "", "githubUrl": "",
      "highlights": [], "relevanceScore": 0, "keyTechnologies": []
    }
  ],
  "optimizationNotes": {"projectsIncluded": 0, "projectsFiltered": 0, "keywordsAdded": [], "technicalAlignment": "", "overallRelevance": 0},
  "recommendations": []
}"""

STAGE_SYSTEM_PROMPTS = {
    "analyzer": ANALYZER_SYSTEM_PROMPT,
    "matcher": MATCHER_SYSTEM_PROMPT,
    "experience": EXPERIENCE_SYSTEM_PROMPT,
    "skills": SKILLS_SYSTEM_PROMPT,
    "projects": PROJECTS_SYSTEM_PROMPT,
}


def _duration(start: str, end: str) -> str:
    return f"{start or 'Unknown'} - {end or 'Present'}"


def summarize_profile(profile: Profile) -> Dict[str, Any]:
    """Compact profile view sent to the matcher."""
    return {
        "name": profile.name,
        "title": profile.title,
        "about": profile.about,
        "skills": [skill.name for skill in profile.skills if skill.name],
        "experience": [
            {
                "position": exp.position,
                "company": exp.company,
                "duration": _duration(exp.start_date, exp.end_date),
                "description": exp.description,
            }
            for exp in profile.experiences
        ],
        "education": [
            {
                "degree": edu.degree,
                "school": edu.school,
                "duration": _duration(edu.start_date, edu.end_date),
            }
            for edu in profile.education
        ],
        "projects": [
            {
                "title": proj.title,
                "technologies": proj.technologies,
                "duration": _duration(proj.start_date, proj.end_date),
                "description": proj.description,
            }
            for proj in profile.projects
        ],
    }


def _dump(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


def build_analyzer_prompt(job_description: str) -> str:
    return f"Analyze this job description thoroughly:\n\n{job_description}"


def build_matcher_prompt(profile: Profile, analysis: JobAnalysis) -> str:
    return (
        "Compare this candidate profile with the job analysis.\n\n"
        f"CANDIDATE PROFILE:\n{_dump(summarize_profile(profile))}\n\n"
        f"JOB ANALYSIS:\n{_dump(analysis.raw)}"
    )


def _section_prompt(
    section_label: str, section: List[Dict[str, Any]], analysis: JobAnalysis, match: MatchAnalysis
) -> str:
    return (
        f"Optimize the candidate's {section_label} for this job.\n\n"
        f"CANDIDATE {section_label.upper()}:\n{_dump(section)}\n\n"
        f"JOB ANALYSIS:\n{_dump(analysis.raw)}\n\n"
        f"MATCH ANALYSIS:\n{_dump(match.raw)}"
    )


def build_experience_prompt(profile: Profile, analysis: JobAnalysis, match: MatchAnalysis) -> str:
    experiences = [
        {
            "title": exp.position,
            "company": exp.company,
            "location": exp.location,
            "startDate": exp.start_date,
            "endDate": exp.end_date,
            "description": exp.description,
        }
        for exp in profile.experiences
    ]
    return _section_prompt("work experience", experiences, analysis, match)


def build_skills_prompt(profile: Profile, analysis: JobAnalysis, match: MatchAnalysis) -> str:
    skills = [{"name": skill.name, "domain": skill.domain} for skill in profile.skills]
    return _section_prompt("skills", skills, analysis, match)


def build_projects_prompt(profile: Profile, analysis: JobAnalysis, match: MatchAnalysis) -> str:
    projects = [
        {
            "title": proj.title,
            "technologies": proj.technologies,
            "startDate": proj.start_date,
            "endDate": proj.end_date,
            "projectUrl": proj.project_url,
            "githubUrl": proj.github_url,
            "description": proj.description,
        }
        for proj in profile.projects
    ]
    return _section_prompt("projects", projects, analysis, match)
