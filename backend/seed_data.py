"""
Seed script with demo projects, a campaign, shop products and a news article.
Run: python backend/seed_data.py
"""
import datetime

from init_db import init
from waqf.campaign_models import Campaign, CampaignTranslation
from waqf.content_models import Content, ContentTranslation
from waqf.database import SessionLocal
from waqf.enums import ContentType, Language
from waqf.product_models import Category, CategoryTranslation, Product, ProductTranslation
from waqf.project_models import Project, ProjectTranslation

PROJECTS = [
    {
        "slug": "construction-daara-touba", "goal_amount": 25_000_000, "is_urgent": True, "is_featured": True,
        "translations": [
            {"language": Language.FR, "title": "Construction d'un daara à Touba",
             "description": "Salles de classe et dortoirs pour 200 talibés.", "short_desc": "Un daara pour 200 talibés"},
            {"language": Language.EN, "title": "Building a daara in Touba",
             "description": "Classrooms and dormitories for 200 students.", "short_desc": "A daara for 200 students"},
            {"language": Language.AR, "title": "بناء دارة في طوبى",
             "description": "فصول دراسية ومهاجع لـ 200 طالب.", "short_desc": "دارة لـ 200 طالب"},
        ],
    },
    {
        "slug": "puits-louga", "goal_amount": 4_500_000, "is_featured": True,
        "translations": [
            {"language": Language.FR, "title": "Un puits à Louga", "description": "Accès à l'eau potable pour le village."},
            {"language": Language.EN, "title": "A well in Louga", "description": "Clean water for the village."},
        ],
    },
]

CATEGORIES = [
    {"slug": "livres", "translations": [
        {"language": Language.FR, "name": "Livres"}, {"language": Language.EN, "name": "Books"},
        {"language": Language.AR, "name": "كتب"},
    ]},
    {"slug": "artisanat", "translations": [
        {"language": Language.FR, "name": "Artisanat"}, {"language": Language.EN, "name": "Crafts"},
    ]},
]

PRODUCTS = [
    {"slug": "coran-tajwid", "price": 15_000, "stock": 40, "category": "livres", "translations": [
        {"language": Language.FR, "name": "Coran Tajwid"}, {"language": Language.EN, "name": "Tajweed Quran"},
    ]},
    {"slug": "tapis-priere", "price": 5_000, "compare_price": 7_500, "stock": 100, "category": "artisanat",
     "translations": [
         {"language": Language.FR, "name": "Tapis de prière"}, {"language": Language.EN, "name": "Prayer mat"},
     ]},
]


def seed():
    init()
    db = SessionLocal()
    try:
        projects = {}
        for p_data in PROJECTS:
            existing = db.query(Project).filter(Project.slug == p_data["slug"]).first()
            if existing:
                projects[existing.slug] = existing
                print(f"⏭️  Skipped (exists): {p_data['slug']}")
                continue
            data = dict(p_data)
            translations = data.pop("translations")
            project = Project(**data, translations=[ProjectTranslation(**t) for t in translations])
            db.add(project)
            projects[project.slug] = project
            print(f"✅ Added project: {p_data['slug']}")

        if not db.query(Campaign).filter(Campaign.slug == "ramadan").first():
            now = datetime.datetime.utcnow()
            db.add(Campaign(
                slug="ramadan", goal_amount=10_000_000,
                start_date=now - datetime.timedelta(days=3), end_date=now + datetime.timedelta(days=27),
                projects=list(projects.values()),
                translations=[
                    CampaignTranslation(language=Language.FR, title="Campagne Ramadan", description="Iftar et kits scolaires."),
                    CampaignTranslation(language=Language.AR, title="حملة رمضان", description="إفطار وأدوات مدرسية."),
                ],
            ))
            print("✅ Added campaign: ramadan")

        categories = {}
        for c_data in CATEGORIES:
            category = db.query(Category).filter(Category.slug == c_data["slug"]).first()
            if not category:
                category = Category(slug=c_data["slug"],
                                    translations=[CategoryTranslation(**t) for t in c_data["translations"]])
                db.add(category)
                print(f"✅ Added category: {c_data['slug']}")
            categories[category.slug] = category

        for p_data in PRODUCTS:
            if db.query(Product).filter(Product.slug == p_data["slug"]).first():
                print(f"⏭️  Skipped (exists): {p_data['slug']}")
                continue
            data = dict(p_data)
            translations = data.pop("translations")
            category = categories[data.pop("category")]
            db.add(Product(**data, categories=[category],
                           translations=[ProductTranslation(**t) for t in translations]))
            print(f"✅ Added product: {p_data['slug']}")

        if not db.query(Content).filter(Content.slug == "ouverture-daara").first():
            db.add(Content(
                slug="ouverture-daara", type=ContentType.ARTICLE, is_published=True,
                published_at=datetime.datetime.utcnow(),
                translations=[ContentTranslation(language=Language.FR, title="Ouverture du daara",
                                                 body="Le nouveau daara accueille ses premiers élèves.")],
            ))
            print("✅ Added article: ouverture-daara")

        db.commit()
    finally:
        db.close()
    print("\n🎉 Seeding completed!")


if __name__ == "__main__":
    seed()
