from database.db import Base, engine
import models.attendees          # noqa: F401  (register tables)
import models.attendance_logs    # noqa: F401


def init_db():
    Base.metadata.create_all(bind=engine)
    print("✅ attendees / attendance_logs tables ready")


if __name__ == "__main__":
    # python -m scripts.init_db
    init_db()
