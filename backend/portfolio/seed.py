"""Demo content inserted into an empty database.

`seed_database` is a no-op once any project exists, so it is safe to
run on every startup (see `SEED_ON_STARTUP`) or from
`scripts/seed_content.py`.
"""

import logging

from sqlmodel import Session

from . import models, repositories

logger = logging.getLogger("portfolio.seed")

PROJECTS = [
    {
        "title": "Internal Ticket Manager",
        "slug": "internal-ticket-manager",
        "description": "Helpdesk system with a Kanban board, robust state management and role-based access control, built to streamline internal support workflows.",
        "content": (
            "Internal Ticket Manager is a complete helpdesk for internal teams, built from scratch "
            "around a clean, scalable architecture.\n\n"
            "It ships an interactive Kanban board with drag-and-drop between columns, role-based "
            "authentication (admin, agent, user), a live metrics dashboard, WebSocket notifications, "
            "advanced filters and a full action history per ticket.\n\n"
            "The backend is Node.js and TypeScript on Drizzle ORM, the frontend is React, and "
            "everything runs in Docker behind an Nginx reverse proxy."
        ),
        "tech_stack": ["Node.js", "TypeScript", "React", "Drizzle ORM", "Docker", "Nginx"],
        "featured": True,
    },
    {
        "title": "ERP Backend Architecture",
        "slug": "erp-backend-architecture",
        "description": "Maintenance and evolution of a large ERP: complex backend features, custom RDLC reports and heavily optimised SQL.",
        "content": (
            "Maintenance and modernisation of a large-scale ERP system on the Microsoft stack.\n\n"
            "Work covered backend features, custom RDLC reports with sub-reports and dynamic "
            "parameters, a gradual migration of VB.NET modules to C#, Entity Framework for new "
            "modules, supplier API integrations and SQL tuning that cut some query times by 80%."
        ),
        "tech_stack": ["C#", "VB.NET", "ASP.NET Web Forms", "Entity Framework", "SQL Server", "RDLC"],
        "featured": True,
    },
    {
        "title": "Paperless API",
        "slug": "paperless-api",
        "description": "RESTful API in C# and .NET that digitises office workflows end to end and removes paper from the approval process.",
        "content": (
            "Paperless API digitises office processes that used to depend on paper.\n\n"
            "It provides a documented REST API, automated document approval workflows, SQL Server "
            "reporting, pending-task notifications and digital signatures. Paper use dropped by 90% "
            "and approval time by 60%."
        ),
        "tech_stack": ["C#", ".NET", "SQL Server", "REST API", "Swagger"],
        "featured": True,
    },
]

SKILLS = [
    ("React", "Frontend", 90),
    ("TypeScript", "Frontend", 92),
    ("Tailwind CSS", "Frontend", 88),
    ("HTML/CSS", "Frontend", 95),
    ("JavaScript", "Frontend", 93),
    ("Next.js", "Frontend", 75),
    ("Node.js", "Backend", 88),
    ("C#", "Backend", 85),
    (".NET", "Backend", 83),
    ("PostgreSQL", "Backend", 82),
    ("SQL Server", "Backend", 80),
    ("REST APIs", "Backend", 90),
    ("Docker", "DevOps", 78),
    ("CI/CD", "DevOps", 75),
    ("Nginx", "DevOps", 70),
    ("Git", "Tools", 90),
    ("VS Code", "Tools", 95),
    ("Drizzle ORM", "Tools", 82),
]

EXPERIENCES = [
    {
        "company": "Technology Company",
        "role": "Fullstack Developer",
        "start_date": "Jan 2024",
        "end_date": None,
        "description": "Building and maintaining fullstack web applications, CI/CD pipelines, scalable APIs and responsive interfaces.",
        "achievements": [
            "Shipped a Kanban ticketing system with RBAC",
            "Cut SQL query times by 80%",
            "Migrated legacy VB.NET modules to C#",
            "Automated internal processes, reducing paper use by 90%",
        ],
    },
    {
        "company": "ERP Software Company",
        "role": "Backend Developer",
        "start_date": "Jun 2023",
        "end_date": "Dec 2023",
        "description": "Maintained and extended a corporate ERP system with complex backend features and custom reports.",
        "achievements": [
            "Built complex RDLC reports",
            "Integrated external supplier APIs",
            "Introduced Entity Framework for new modules",
        ],
    },
    {
        "company": "University",
        "role": "BSc in Computer Science",
        "start_date": "Mar 2020",
        "end_date": "Dec 2024",
        "description": "Computer Science degree focused on algorithms, data structures, software engineering and web development.",
        "achievements": [
            "Academic projects in AI and machine learning",
            "Hackathons and programming contests",
            "Teaching assistant for programming courses",
        ],
    },
]


def seed_database(session: Session) -> bool:
    """Insert the demo projects, skills and experiences into an empty database.

    Returns True when rows were inserted, False when projects already existed.
    """
    if repositories.ProjectRepository(session).count() > 0:
        logger.info("database already seeded, skipping")
        return False
    logger.info("seeding database")
    for data in PROJECTS:
        session.add(models.Project(**data))
    for name, category, proficiency in SKILLS:
        session.add(models.Skill(name=name, category=category, proficiency=proficiency))
    for data in EXPERIENCES:
        session.add(models.Experience(**data))
    session.commit()
    logger.info(
        "seeded %d projects, %d skills, %d experiences",
        len(PROJECTS), len(SKILLS), len(EXPERIENCES),
    )
    return True
