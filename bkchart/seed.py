# bkchart/seed.py
import logging

from flask import current_app

from . import db
from .models.admin import Admin
from .models.point import Point

logger = logging.getLogger(__name__)

# Default checklist, in display order
DEFAULT_POINTS = [
    "பிறரிடம் பேசும்பொழுது ஆத்ம உணர்வோடு, ஆத்மாவோடு பேசினேனா?",
    "அமிர்தவேளை சக்திசாலியாக இருந்ததா?",
    "(அமிர்த வேளை உட்பட) 4 மணி நேரம் அமர்ந்து யோகா செய்தேனா?",
    "அவ்யக்த முரளி படித்து, ஆழ்ந்து சிந்தித்தேனா?",
    "அன்றாட முரளியில் 10 பாயிண்ட்ஸ் எழுதினேனா?",
    "பாபா நினைவில் உணவை மெதுவாக மென்று சாப்பிட்டேனா?",
    "குறைந்தது அரை மணி நேரம் உடற்பயிற்சி செய்தேனா?",
    "குறைந்தது 5 முறை டிரில் செய்தேனா?",
    "மனசா சேவை இயற்கைக்கு, உலகிற்கு செய்தேனா?",
    "இரவு பாபாவிடம் கணக்கு ஒப்படைப்பேனா?",
]


def seed_defaults():
    """Create the default admin and points when they are missing."""
    username = current_app.config.get("DEFAULT_ADMIN_USERNAME")
    password = current_app.config.get("DEFAULT_ADMIN_PASSWORD")

    try:
        if username and password and not Admin.query.filter_by(username=username).first():
            admin = Admin(username=username)
            admin.set_password(password)
            db.session.add(admin)
            logger.info("created default admin '%s'", username)

        # only an empty catalog gets the defaults, admins own it afterwards
        if Point.query.count() == 0:
            for i, text in enumerate(DEFAULT_POINTS, start=1):
                db.session.add(Point(text=text, order_num=i))
            logger.info("added %d default points", len(DEFAULT_POINTS))

        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception("seeding defaults failed")
        raise
