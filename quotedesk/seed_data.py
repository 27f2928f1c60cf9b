"""Factory catalog used to seed empty portals and as a read fallback."""
from __future__ import annotations

from .constants import PORTALS, Portal
from .schemas import AccommodationType, Program


def _gallery(seed: int) -> list[str]:
    return [f"https://picsum.photos/400/300?random={seed * 100 + index}" for index in range(1, 5)]


_FACTORY_PROGRAMS: tuple[Program, ...] = (
    Program(
        id="1",
        name="Explore London: Summer",
        location="King's College London",
        city="London",
        country="England",
        age_range="12-17 years",
        dates="2 July, 9 July, 16 July, 23 July, 30 July / 6 August",
        duration="1-2 weeks",
        accommodation_type=AccommodationType.RESIDENCE,
        accommodation_details="Great Dover Street or Moonraker Point (Zone 1, single en-suite)",
        included_services=[
            "15 hours of General English per week",
            "Central London accommodation",
            "Full board meal plan",
            "**Travelcard** (London travel pass)",
            "Daily excursions and evening activities",
            "One full-day trip within London",
            "End of course certificate",
        ],
        young_learners_goals=[
            "Understand British culture more deeply",
            "Work on projects in small groups",
            "Explore London and visit famous sights",
            "Improve English language skills",
            "Become a more independent learner",
            "Develop life skills",
            "Make friends from around the world",
        ],
        description=(
            "Exploring London is an exciting way for Young Learners to improve their English "
            "while discovering a new culture. The summer camp combines English lessons with daily "
            "visits to famous landmarks, so students practise their English in real situations "
            "alongside classmates from all over the world."
        ),
        hero_image="https://picsum.photos/800/400?random=1",
        banner_image="",
        gallery_images=_gallery(1),
        timetable_images=[],
        base_price_note="Request a quote",
    ),
    Program(
        id="2",
        name="Explore England: Bedford School",
        location="Bedford School",
        city="Bedford",
        country="England",
        age_range="12-17 years",
        dates="7 July, 14 July, 21 July, 28 July",
        duration="1-2 weeks",
        accommodation_type=AccommodationType.CAMPUS,
        accommodation_details="High quality rooms in boarding school houses",
        included_services=[
            "High quality boarding accommodation",
            "Full board meals",
            "Online placement test",
            "15 hours of General English per week",
            "Evening entertainment",
            "One full-day excursion",
            "End of course certificate and graduation",
        ],
        young_learners_goals=[
            "Improve English language skills",
            "Understand British culture more deeply",
            "Work on projects in small groups",
            "Take part in fun social activities",
            "Enjoy extensive campus facilities",
            "Explore a local town and its sights",
            "Become a more independent learner",
        ],
        description=(
            "Founded in 1552, Bedford School is one of England's leading boarding schools. Its "
            "historic 40-acre site offers excellent facilities for sport, creativity and study, "
            "ideally placed between Oxford, Cambridge and London."
        ),
        hero_image="https://picsum.photos/800/400?random=2",
        banner_image="",
        gallery_images=_gallery(2),
        timetable_images=[],
        base_price_note="Request a quote",
    ),
    Program(
        id="3",
        name="YL City Explorer, Manchester",
        location="BSC Manchester",
        city="Manchester",
        country="England",
        age_range="12-17 years",
        dates="5 July & 12 July 2026",
        duration="Minimum 1 week",
        accommodation_type=AccommodationType.RESIDENCE,
        accommodation_details="Brook Hall - single en-suite rooms",
        included_services=[
            "High quality residence accommodation",
            "Full board meals",
            "15 hours of English tuition per week",
            "Trips to local attractions",
            "Evening entertainment",
            "End of course certificate",
            "Graduation ceremony",
        ],
        young_learners_goals=[
            "Improve English language skills",
            "Build creativity, problem solving and confidence",
            "Understand British culture more deeply",
            "Take part in project-based tasks in small groups",
            "Strengthen teamwork and communication",
            "Explore local attractions",
            "Have fun and make international friends",
        ],
        description=(
            "City Explorer Manchester is an activity-packed summer programme for 12-17 year olds "
            "at our school in the heart of Manchester. Dynamic lessons and project-based learning "
            "build English alongside confidence, independence and critical thinking."
        ),
        hero_image="https://picsum.photos/800/400?random=3",
        banner_image="",
        gallery_images=_gallery(3),
        timetable_images=[],
        base_price_note="£995 per person",
    ),
    Program(
        id="4",
        name="Future Leaders",
        location="Bedford School",
        city="Bedford",
        country="England",
        age_range="12-17 years",
        dates="7 July, 14 July, 21 July, 28 July",
        duration="2 weeks",
        accommodation_type=AccommodationType.CAMPUS,
        accommodation_details="Boarding school accommodation",
        included_services=[
            "High quality accommodation",
            "Full board meals",
            "One full-day excursion",
            "20 hours of Content and Language Integrated Learning per week",
            "Evening activities",
            "End of course certificate",
            "Graduation",
        ],
        young_learners_goals=[
            "Strengthen leadership and teamwork",
            "Learn how products are developed and launched",
            "Develop creativity and problem solving",
            "Gain confidence in public speaking and presenting",
            "Build life skills for personal and academic growth",
            "Understand how the business world works",
            "Grow into independent, self-motivated learners",
        ],
        description=(
            "Future Leaders helps 12-17 year olds develop real-world leadership and communication "
            "skills. Hands-on workshops in budgeting, marketing, finance and project planning teach "
            "students how products are built and launched, at the prestigious Bedford School."
        ),
        hero_image="https://picsum.photos/800/400?random=4",
        banner_image="",
        gallery_images=_gallery(4),
        timetable_images=[],
        base_price_note="Request a quote",
    ),
    Program(
        id="5",
        name="Explore England: Wellington School",
        location="Wellington School",
        city="Wellington (Somerset)",
        country="England",
        age_range="10-17 years",
        dates="7 July, 14 July, 21 July, 28 July, 4 August",
        duration="1-2 weeks",
        accommodation_type=AccommodationType.CAMPUS,
        accommodation_details="High quality rooms in boarding houses",
        included_services=[
            "High quality boarding house accommodation",
            "Full board meals",
            "Online placement test",
            "15 hours of General English per week",
            "Evening activities",
            "One full-day excursion",
            "Levelled end of course certificate",
            "Graduation",
        ],
        young_learners_goals=[
            "Improve English language skills",
            "Understand British culture more deeply",
            "Work on projects in small groups",
            "Take part in fun social activities",
            "Enjoy extensive campus facilities",
            "Explore a local town and its sights",
            "Become a more independent learner",
            "Develop life skills",
        ],
        description=(
            "Set in beautiful South West England, Wellington School offers a memorable summer camp. "
            "Founded in 1837, the school blends history with modern facilities on a 35-acre campus "
            "near the Blackdown Hills, including a sports hall, pool and tennis courts."
        ),
        hero_image="https://picsum.photos/800/400?random=5",
        banner_image="",
        gallery_images=_gallery(5),
        timetable_images=[],
        base_price_note="Request a quote",
    ),
    Program(
        id="6",
        name="Boarding Immersion Programme - Wellington School",
        location="Wellington School",
        city="Wellington (Somerset)",
        country="England",
        age_range="10-17 years",
        dates="Spring (5 January - 1 April) or Autumn (7 September - 11 December) terms",
        duration="1 week up to 2 terms",
        accommodation_type=AccommodationType.CAMPUS,
        accommodation_details="Full board in secure boarding houses",
        included_services=[
            "Around 30 after-school clubs and activities",
            "Full board accommodation",
            "Dinner and supervised prep time",
            "Sports hall activities",
            "Graduation in the Wellington School Chapel",
            "Tuition with specialist teachers",
        ],
        young_learners_goals=[
            "Experience life in a friendly, lively community",
            "Study alongside British students wherever possible",
            "Receive English support in small mixed-nationality groups",
            "Learn in small classes with specialist teachers",
            "Attend a graduation in the Wellington School Chapel",
        ],
        description=(
            "A short boarding school experience for international students aged 10-17, living and "
            "studying alongside British pupils at a leading UK independent boarding school. Ideal "
            "for families who want to get to know the school before a long-term choice."
        ),
        hero_image="https://picsum.photos/800/400?random=6",
        banner_image="",
        gallery_images=_gallery(6),
        timetable_images=[],
        base_price_note="Request a quote",
    ),
    Program(
        id="7",
        name="Explore Malta",
        location="Malta",
        city="Malta",
        country="Malta",
        age_range="12-17 years",
        dates="29 June - 3 August (weekly starts)",
        duration="1-2 weeks",
        accommodation_type=AccommodationType.RESIDENCE,
        accommodation_details="High quality accommodation",
        included_services=[
            "High quality accommodation",
            "Full board meals",
            "Online placement test",
            "15 hours of General English per week",
            "Daily trips to famous sights",
            "Evening entertainment",
            "End of course certificate",
            "FELTOM beach or pool party",
        ],
        young_learners_goals=[
            "Understand the local culture more deeply",
            "Work on projects in small groups",
            "Explore Malta and visit famous sights",
            "Improve English language skills",
            "Become a more independent learner",
            "Develop life skills",
            "Make friends from around the world",
        ],
        description=(
            "Malta is the only Mediterranean country where English is an official language spoken "
            "by most of the population. Young Learners combine English lessons with daily trips to "
            "famous sights and beautiful locations."
        ),
        hero_image="https://picsum.photos/800/400?random=7",
        banner_image="",
        gallery_images=_gallery(7),
        timetable_images=[],
        base_price_note="Request a quote",
    ),
)


def factory_programs(portal: Portal) -> list[Program]:
    """Return fresh copies of the factory catalog with ids derived for ``portal``."""

    prefix = PORTALS[portal].factory_id_prefix
    return [
        program.model_copy(update={"id": f"{prefix}{program.id}"}, deep=True)
        for program in _FACTORY_PROGRAMS
    ]


def factory_names(portal: Portal) -> list[str]:
    return [program.name for program in factory_programs(portal)]
