"""
Local fallback generators.

Used when the LLM is unavailable so the user still gets editable content.
Output is template-based and randomized; pass a seeded random.Random for
reproducible results.
"""

import random
from typing import Dict, List, Optional, Sequence

from boron.utils.text_processing import split_bullet_lines, split_comma_list

ACTION_WORDS = ["Successfully", "Effectively", "Proactively", "Strategically"]

FALLBACK_BULLET_COUNT = 4

ABOUT_ENHANCEMENT = (
    "I'm passionate about delivering high-quality results and continuously improving my skills."
)

# Technology keyword -> skill domain for project technologies
TECHNOLOGY_DOMAINS = [
    ("Frontend Development", ["react", "angular", "vue", "html", "css", "javascript"]),
    ("Backend Development", ["node", "express", "python", "django", "sql", "mongodb", "postgres"]),
    ("DevOps", ["aws", "docker", "kubernetes", "ci/cd", "jenkins"]),
]

# Position keyword -> technical skills for the first experience
POSITION_SKILLS = [
    (
        ("frontend", "ui"),
        [
            ("React", "Frontend Development"),
            ("JavaScript", "Frontend Development"),
            ("HTML/CSS", "Frontend Development"),
        ],
    ),
    (
        ("backend",),
        [
            ("Node.js", "Backend Development"),
            ("Express", "Backend Development"),
            ("SQL", "Backend Development"),
        ],
    ),
    (("full",), [("React", "Frontend Development"), ("Node.js", "Backend Development")]),
]

# Complementary suggestions per existing domain
DOMAIN_SUGGESTIONS = {
    "Frontend Development": ["Next.js", "Tailwind CSS"],
    "Backend Development": ["Express.js", "MongoDB"],
    "DevOps": ["Docker", "AWS"],
}

GENERIC_SKILLS = [
    ("JavaScript", "Frontend Development"),
    ("React", "Frontend Development"),
    ("Node.js", "Backend Development"),
    ("SQL", "Backend Development"),
    ("Problem Solving", "Soft Skills"),
    ("Communication", "Soft Skills"),
]


def _skill(name: str, domain: str) -> Dict[str, str]:
    return {"name": name, "domain": domain}


def generate_fallback_about(
    experiences: Sequence = (),
    skills: Sequence[str] = (),
    education: Sequence = (),
    current_about: str = "",
    mode: str = "replace",
) -> str:
    """
    Template about section.

    Enhance mode with existing text appends one sentence; otherwise the text
    is built from the first experience, skill and education entry.
    """
    if mode == "enhance" and current_about.strip():
        return f"{current_about.rstrip()}\n\n{ABOUT_ENHANCEMENT}"

    experience = experiences[0] if experiences else None
    position = getattr(experience, "position", "") or "professional"
    company = getattr(experience, "company", "") or "leading companies"
    skill = skills[0] if skills else "professional skills"

    sentences = [
        f"I am a seasoned {position} with experience at {company} in the industry.",
        f"My expertise in {skill} allows me to deliver exceptional results.",
    ]
    if education:
        degree = getattr(education[0], "degree", "")
        school = getattr(education[0], "school", "")
        if degree and school:
            sentences.append(f"I hold a {degree} from {school}.")
    sentences.append(
        "I'm passionate about tackling complex challenges and driving innovation in everything I do."
    )
    sentences.append(
        "My collaborative approach and attention to detail have helped me consistently "
        "exceed expectations throughout my career."
    )
    return " ".join(sentences)


def _prefix_action_word(line: str, rng: random.Random) -> str:
    if any(line.startswith(f"{word} ") for word in ACTION_WORDS):
        return line
    return f"{rng.choice(ACTION_WORDS)} {line[:1].lower()}{line[1:]}"


def generate_fallback_description(
    description_type: str,
    position: str = "",
    company: str = "",
    title: str = "",
    technologies: str = "",
    current_description: str = "",
    mode: str = "replace",
    rng: Optional[random.Random] = None,
) -> str:
    """
    Template bullet points, one per line.

    Enhance mode with an existing description prefixes each bullet with an
    action word (bullets that already start with one are kept). Otherwise
    FALLBACK_BULLET_COUNT bullets are sampled from a type-specific pool.
    """
    rng = rng or random.Random()

    if mode == "enhance" and current_description.strip():
        return "\n".join(
            _prefix_action_word(line, rng) for line in split_bullet_lines(current_description)
        )

    if description_type == "experience":
        position = position or "professional"
        company = company or "company"
        pool = [
            f"Led cross-functional teams to deliver key projects for {company}",
            "Implemented process improvements that increased team productivity by 20%",
            "Collaborated with stakeholders to define and prioritize product requirements",
            "Managed project timelines and resources to ensure on-time delivery",
            f"Mentored junior {position.lower()} team members",
            f"Developed and implemented strategies that improved {company}'s operational efficiency",
            "Spearheaded initiatives that resulted in 15% cost reduction",
            "Created documentation and processes that improved team onboarding",
        ]
    else:
        title = title or "project"
        tech_list = split_comma_list(technologies) or ["technology"]
        pool = [
            f"Designed and developed {title} using {' and '.join(tech_list[:2])}",
            "Implemented responsive design ensuring compatibility across all devices and browsers",
            "Created robust backend API endpoints to handle data processing and storage",
            "Optimized application performance resulting in 40% faster load times",
            "Integrated third-party services and APIs to enhance functionality",
            "Collaborated with design team to implement UI/UX best practices",
            "Set up CI/CD pipeline for automated testing and deployment",
            f"Utilized {tech_list[0]} for frontend components and state management",
        ]

    return "\n".join(rng.sample(pool, FALLBACK_BULLET_COUNT))


def _technology_domain(technology: str) -> str:
    lowered = technology.lower()
    for domain, keywords in TECHNOLOGY_DOMAINS:
        if any(keyword in lowered for keyword in keywords):
            return domain
    return "Other"


def generate_fallback_skills(
    experiences: Sequence = (),
    projects: Sequence = (),
    current_skills: Sequence[Dict[str, str]] = (),
    mode: str = "add",
    rng: Optional[random.Random] = None,
) -> List[Dict[str, str]]:
    """
    Rule-based skill suggestions as {"name", "domain"} dicts.

    Suggest mode (with existing skills) proposes complements per existing
    domain; add mode derives skills from the first experience's position and
    the first project's technologies, falling back to a generic set.
    """
    rng = rng or random.Random()
    skills: List[Dict[str, str]] = []

    if mode == "suggest" and current_skills:
        domains = list(dict.fromkeys(skill["domain"] for skill in current_skills))
        for domain in domains:
            for name in DOMAIN_SUGGESTIONS.get(domain, [f"Advanced {domain}"]):
                skills.append(_skill(name, domain))
        skills.append(_skill("Unit Testing", "Quality Assurance"))
        skills.append(_skill("Jest", "Quality Assurance"))
        return _without_existing(skills, current_skills)

    if experiences:
        position = (getattr(experiences[0], "position", "") or "").lower()
        for keywords, position_skills in POSITION_SKILLS:
            if any(keyword in position for keyword in keywords):
                skills.extend(_skill(name, domain) for name, domain in position_skills)
                break
        skills.append(_skill("Team Leadership", "Leadership"))
        skills.append(_skill("Project Management", "Management"))

    if projects:
        for technology in split_comma_list(getattr(projects[0], "technologies", "")):
            skills.append(_skill(technology, _technology_domain(technology)))

    if not skills:
        generic = list(GENERIC_SKILLS)
        rng.shuffle(generic)
        skills = [_skill(name, domain) for name, domain in generic]

    return _without_existing(skills, current_skills)


def _without_existing(
    skills: List[Dict[str, str]], current_skills: Sequence[Dict[str, str]]
) -> List[Dict[str, str]]:
    existing = {skill["name"].lower() for skill in current_skills}
    unique = []
    for skill in skills:
        key = skill["name"].lower()
        if key not in existing:
            existing.add(key)
            unique.append(skill)
    return unique


def _first(items: Sequence):
    return items[0] if items else None


def _top_skills(skills: Sequence, count: int = 3) -> str:
    names = [getattr(skill, "name", "") for skill in skills[:count]]
    return ", ".join(name for name in names if name)


def generate_fallback_cover_letter(
    profile,
    job_title: str = "",
    company_name: str = "",
    letter_date: str = "",
) -> str:
    """
    Template cover letter built from the profile's latest experience,
    top skills and first project. Only profile facts are used.
    """
    role = job_title or "the open position"
    company = company_name or "your company"
    experience = _first(profile.experiences)
    project = _first(profile.projects)
    skills = _top_skills(profile.skills) or "my core skills"

    header = [line for line in (profile.name, profile.email, profile.phone, letter_date) if line]
    paragraphs = [
        "Dear Hiring Manager,",
        f"I am excited to apply for {role} at {company}."
        + (f" {profile.about.strip()}" if profile.about.strip() else ""),
    ]
    if experience is not None:
        paragraphs.append(
            f"As {experience.position} at {experience.company}, I have built hands-on experience "
            f"with {skills}, and I would bring the same focus on results to your team."
        )
    else:
        paragraphs.append(f"My background in {skills} has prepared me to contribute from day one.")
    if project is not None and project.title:
        technologies = f" with {project.technologies}" if project.technologies else ""
        paragraphs.append(f"Recently I built {project.title}{technologies}.")
    paragraphs.append(
        "Thank you for considering my application. I would welcome the chance to discuss "
        "how I can contribute, and I am available for an interview at your convenience."
    )
    paragraphs.append(f"Sincerely,\n{profile.name or 'Candidate'}")
    return "\n".join(header) + ("\n\n" if header else "") + "\n\n".join(paragraphs)


EMAIL_FOLLOW_UP_ACTIONS = [
    "Follow up within 5-7 days if no response",
    "Connect with recruiter on LinkedIn with personalized note",
    "Research company news and developments for follow-up topics",
]

EMAIL_CLOSING = (
    "I would be so grateful if you looked at my resume and let me know if I'm fit for this job. "
    "I'm attaching my resume and LinkedIn profile{linkedin}.\n\nThank you so much for your time."
)


def generate_fallback_email(
    email_type: str,
    job_title: str,
    company_name: str,
    recruiter_name: str,
    profile=None,
) -> Dict[str, object]:
    """
    Template outreach email as {"subject", "body", "suggested_actions"}.

    Unknown email types use the application template.
    """
    candidate = (getattr(profile, "name", "") if profile else "") or "Candidate"
    skills = _top_skills(profile.skills) if profile else ""
    skills = skills or "relevant technical skills"
    linkedin = getattr(profile, "linkedin_url", "") if profile else ""
    closing = EMAIL_CLOSING.format(linkedin=f": {linkedin}" if linkedin else "")

    experience = _first(profile.experiences) if profile else None
    if experience is not None:
        description = experience.description.strip()
        detail = f"{description[:80]}..." if description else "developing my expertise in the field"
        experience_text = (
            f"Currently working as {experience.position} at {experience.company}, "
            f"where I've been {detail}"
        )
    else:
        experience_text = "I've been gaining valuable experience in my current role."

    subjects = {
        "application": f"{candidate} here - excited about the {job_title} role!",
        "follow-up": f"Following up on {job_title} - still very interested!",
        "thank-you": f"Thanks for the great conversation about {job_title}",
        "inquiry": f"{candidate} - exploring opportunities at {company_name}",
        "withdrawal": f"Update on {job_title} application",
    }
    bodies = {
        "application": (
            f"I came across the {job_title} position at {company_name} and couldn't help but get "
            "excited - this looks like exactly the kind of challenge I'm looking for!\n\n"
            f"{experience_text} My background includes experience with {skills}.\n\n{closing}"
        ),
        "follow-up": (
            f"Just wanted to circle back on the {job_title} role. I'm still very excited about "
            "the opportunity and wanted to see if there were any updates.\n\n"
            f"I've been thinking about how my experience with {skills} could contribute to "
            f"{company_name}'s goals.\n\n{closing}"
        ),
        "thank-you": (
            f"Thanks for taking the time to chat about the {job_title} role - I really enjoyed "
            f"our conversation!\n\nI'm particularly excited about the potential to contribute my "
            f"{skills} experience to the team at {company_name}.\n\n{closing}"
        ),
        "inquiry": (
            f"I've been following {company_name} and am really impressed by what you're building. "
            "I'm currently exploring new opportunities and wondered if you might have any openings "
            f"that could be a good fit.\n\n{experience_text} I work primarily with {skills} and am "
            f"particularly interested in roles like {job_title}.\n\n{closing}"
        ),
        "withdrawal": (
            f"I wanted to reach out with an update on the {job_title} position. After much "
            "consideration, I've decided to pursue another opportunity that aligns more closely "
            "with my current career goals.\n\nThis was honestly a difficult decision because I was "
            f"genuinely excited about {company_name}. I hope our paths cross again in the future."
            "\n\nThank you so much for your time."
        ),
    }
    sign_off = "Best wishes" if email_type == "withdrawal" else "Best regards"
    body = bodies.get(email_type, bodies["application"])
    return {
        "subject": subjects.get(email_type, subjects["application"]),
        "body": f"Hi {recruiter_name},\n\n{body}\n\n{sign_off},\n{candidate}",
        "suggested_actions": list(EMAIL_FOLLOW_UP_ACTIONS),
    }


def generate_fallback_summary(profile) -> str:
    """The profile's own about text, or a template about section when it is blank."""
    if profile.about.strip():
        return profile.about.strip()
    return generate_fallback_about(
        experiences=profile.experiences,
        skills=[skill.name for skill in profile.skills if skill.name],
        education=profile.education,
    )
