# medconnect/seed.py
"""Populate the database with an admin, sample patients and doctors.

    python -m medconnect.seed [--reset]
"""
import argparse
import logging

from sqlalchemy.orm import Session

from . import database, models
from .schedule import schedule_from_days
from .security import hash_password

logger = logging.getLogger(__name__)

ADMIN = {"name": "Admin User", "email": "admin@example.com", "password": "admin123", "phone_number": "9876543299"}

PATIENTS = [
    {"name": "John Doe", "email": "john.doe@example.com", "password": "patient123", "phone_number": "9876543220"},
    {"name": "Jane Smith", "email": "jane.smith@example.com", "password": "patient123", "phone_number": "9876543221"},
    {"name": "Robert Johnson", "email": "robert.johnson@example.com", "password": "patient123", "phone_number": "9876543222"},
    {"name": "Mary Williams", "email": "mary.williams@example.com", "password": "patient123", "phone_number": "9876543223"},
]

MWF = ["Monday", "Wednesday", "Friday"]
TTS = ["Tuesday", "Thursday", "Saturday"]
MTTF = ["Monday", "Tuesday", "Thursday", "Friday"]

# (name, email, specialization, experience, fees, address, bio, days, hours, rating, reviews)
DOCTORS = [
    ("Dr. Rajesh Sharma", "rajesh.sharma@example.com", "Cardiology", 15, 1800,
     "Sharma Heart Clinic, 123 Gandhi Road, Mumbai",
     "Senior cardiologist with expertise in interventional cardiology and cardiac electrophysiology",
     MWF, ("09:00", "17:00"), 4.9, 42),
    ("Dr. Sunil Verma", "sunil.verma@example.com", "Cardiology", 12, 1600,
     "Verma Cardiac Center, 456 Patel Street, Delhi",
     "Cardiologist specializing in non-invasive cardiology and cardiac imaging",
     TTS, ("10:00", "18:00"), 4.7, 36),
    ("Dr. Priya Patel", "priya.patel@example.com", "Dermatology", 10, 1400,
     "Patel Skin Care, 789 Nehru Avenue, Bangalore",
     "Dermatologist with specialization in cosmetic dermatology and skin rejuvenation",
     MTTF, ("09:30", "17:30"), 4.8, 32),
    ("Dr. Neha Gupta", "neha.gupta@example.com", "Dermatology", 8, 1300,
     "Gupta Dermatology Center, 234 Tagore Lane, Chennai",
     "Expert in clinical dermatology and pediatric skin conditions",
     MWF, ("10:00", "18:00"), 4.6, 28),
    ("Dr. Vikram Singh", "vikram.singh@example.com", "Orthopedics", 16, 2000,
     "Singh Bone & Joint Hospital, 567 Ambedkar Road, Hyderabad",
     "Orthopedic surgeon specializing in joint replacement surgery and sports injuries",
     MWF, ("09:00", "17:00"), 4.9, 45),
    ("Dr. Rahul Mehta", "rahul.mehta@example.com", "Orthopedics", 12, 1800,
     "Mehta Orthopedic Center, 890 Bose Street, Kolkata",
     "Specialist in spine surgery and orthopaedic trauma",
     TTS, ("10:00", "18:00"), 4.8, 38),
    ("Dr. Anjali Desai", "anjali.desai@example.com", "Pediatrics", 14, 1500,
     "Desai Children's Clinic, 345 Rajput Plaza, Ahmedabad",
     "Experienced pediatrician with focus on newborn care and developmental pediatrics",
     ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"], ("09:00", "17:00"), 4.9, 52),
    ("Dr. Meenakshi Joshi", "meenakshi.joshi@example.com", "Gynecology", 18, 1900, None,
     "Senior gynecologist with expertise in gynecological surgery and infertility treatments",
     MTTF, ("09:00", "17:00"), 4.9, 60),
    ("Dr. Amit Agarwal", "amit.agarwal@example.com", "Neurology", 15, 2000, None,
     "Neurologist specializing in epilepsy, stroke management, and neuro-immunology",
     MWF, ("09:00", "17:00"), 4.8, 42),
    ("Dr. Kavita Reddy", "kavita.reddy@example.com", "Ophthalmology", 16, 1800, None,
     "Eye specialist with expertise in cataract surgery and refractive procedures",
     MTTF, ("09:30", "17:30"), 4.9, 50),
    ("Dr. Sunita Sharma", "sunita.sharma@example.com", "ENT", 14, 1700, None,
     "ENT specialist with focus on sinus disorders and sleep apnea",
     MTTF, ("09:00", "17:00"), 4.8, 46),
    ("Dr. Vinay Kulkarni", "vinay.kulkarni@example.com", "General Medicine", 20, 1500, None,
     "Experienced physician with holistic approach to healthcare",
     ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"], ("09:00", "17:00"), 4.9, 60),
]

DOCTOR_PASSWORD = "doctor123"


def _user(db: Session, name, email, password, phone_number="", is_doctor=False, is_admin=False) -> models.User:
    user = models.User(
        name=name,
        email=email,
        password_hash=hash_password(password),
        phone_number=phone_number,
        is_doctor=is_doctor,
        is_admin=is_admin,
    )
    db.add(user)
    db.flush()
    return user


def seed(db: Session, reset: bool = False) -> None:
    if reset:
        logger.info("Clearing existing data")
        db.query(models.Appointment).delete()
        db.query(models.Doctor).delete()
        db.query(models.User).delete()
        db.flush()
        db.expunge_all()
    elif db.query(models.User).filter(models.User.email == ADMIN["email"]).first():
        logger.info("Seed data already present; use --reset to recreate")
        return

    _user(db, **ADMIN, is_admin=True)
    for patient in PATIENTS:
        _user(db, **patient)

    for index, (name, email, specialty, exp, fees, address, bio, days, hours, rating, reviews) in enumerate(DOCTORS, start=1):
        phone = f"98765432{index:02d}"
        user = _user(db, name, email, DOCTOR_PASSWORD, phone_number=phone, is_doctor=True)
        doc = models.Doctor(
            user_id=user.id,
            name=name,
            specialization=specialty,
            experience=exp,
            fees=fees,
            phone=phone,
            bio=bio,
            rating=rating,
            num_reviews=reviews,
            timings=schedule_from_days(days, *hours),
        )
        if address:
            doc.address = address
        db.add(doc)

    db.commit()
    logger.info("Seeded 1 admin, %d patients, %d doctors", len(PATIENTS), len(DOCTORS))


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Seed the MedConnect database with sample data")
    parser.add_argument("--reset", action="store_true", help="delete existing users, doctors and appointments first")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    database.init_db()
    db = database.SessionLocal()
    try:
        seed(db, reset=args.reset)
    finally:
        db.close()


if __name__ == "__main__":
    main()
