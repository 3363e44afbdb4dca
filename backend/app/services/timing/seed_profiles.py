"""Built-in timing profiles for common medications and supplements."""
from __future__ import annotations

from typing import List, Tuple

from app.api.schemas.timing import ItemProfile, TimeWindow, TimingProfile
from app.services.timing import tags as T


def _profile(
    canonical_name: str,
    display_name: str,
    tags: List[str],
    *,
    kind: str = "med",
    windows: Tuple[Tuple[str, str], ...] = (),
    **timing: object,
) -> ItemProfile:
    return ItemProfile(
        canonical_name=canonical_name,
        display_name=display_name,
        kind=kind,
        tags=tags,
        timing=TimingProfile(
            preferred_windows=[TimeWindow(start=start, end=end) for start, end in windows],
            **timing,
        ),
    )


_EARLY_MORNING = (("06:00", "09:00"),)
_MORNING = (("06:00", "10:00"),)

MEDICATION_PROFILES: List[ItemProfile] = [
    # Absorption/chelation sensitive
    _profile(
        "levothyroxine", "Levothyroxine (Synthroid)", [T.THYROID_HORMONE],
        windows=_EARLY_MORNING, empty_stomach_preferred=True, buffer_before_food_min=60,
    ),
    _profile(
        "alendronate", "Alendronate (Fosamax)", [T.BISPHOSPHONATE],
        windows=_EARLY_MORNING, empty_stomach_preferred=True, buffer_before_food_min=60,
    ),
    _profile("doxycycline", "Doxycycline", [T.TETRACYCLINE], with_food=True, flexible=True),
    _profile("minocycline", "Minocycline", [T.TETRACYCLINE], flexible=True),
    _profile("ciprofloxacin", "Ciprofloxacin (Cipro)", [T.FLUOROQUINOLONE], flexible=True),
    _profile("levofloxacin", "Levofloxacin (Levaquin)", [T.FLUOROQUINOLONE], flexible=True),
    _profile("moxifloxacin", "Moxifloxacin (Avelox)", [T.FLUOROQUINOLONE], flexible=True),
    _profile("azithromycin", "Azithromycin (Zithromax)", [], flexible=True),
    _profile("bictegravir", "Bictegravir (Biktarvy)", [T.INTEGRASE_INHIBITOR], with_food=True),
    _profile("dolutegravir", "Dolutegravir (Tivicay)", [T.INTEGRASE_INHIBITOR], flexible=True),
    # Acid-sensitive, before meals
    _profile(
        "omeprazole", "Omeprazole (Prilosec)", [T.ACID_REDUCER],
        windows=_MORNING, empty_stomach_preferred=True, buffer_before_food_min=30,
    ),
    _profile(
        "esomeprazole", "Esomeprazole (Nexium)", [T.ACID_REDUCER],
        windows=_MORNING, empty_stomach_preferred=True, buffer_before_food_min=30,
    ),
    _profile(
        "pantoprazole", "Pantoprazole (Protonix)", [T.ACID_REDUCER],
        windows=_MORNING, empty_stomach_preferred=True, buffer_before_food_min=30,
    ),
    _profile("famotidine", "Famotidine (Pepcid)", [T.ACID_REDUCER], flexible=True),
    _profile(
        "sucralfate", "Sucralfate (Carafate)", [T.BINDING_AGENT],
        empty_stomach_preferred=True, buffer_before_food_min=60,
    ),
    # Food recommended
    _profile("metformin_ir", "Metformin IR", [T.WITH_FOOD_RECOMMENDED], with_food=True),
    _profile(
        "metformin_xr", "Metformin XR", [T.WITH_FOOD_RECOMMENDED],
        windows=(("18:00", "22:00"),), with_food=True,
    ),
    _profile("ibuprofen", "Ibuprofen (Advil)", [T.WITH_FOOD_RECOMMENDED], with_food=True, flexible=True),
    _profile("naproxen", "Naproxen (Aleve)", [T.WITH_FOOD_RECOMMENDED], with_food=True, flexible=True),
    _profile("prednisone", "Prednisone", [], windows=_MORNING, with_food=True),
    # Stimulants and wakefulness
    _profile(
        "lisdexamfetamine", "Lisdexamfetamine (Elvanse/Vyvanse)", [T.STIMULANT],
        windows=_MORNING, avoid_after_time="14:00", empty_stomach_preferred=True,
        buffer_before_food_min=60, stimulant=True,
    ),
    _profile(
        "methylphenidate_ir", "Methylphenidate IR (Ritalin)", [T.STIMULANT],
        windows=_MORNING, avoid_after_time="14:00", stimulant=True,
    ),
    _profile(
        "methylphenidate_er", "Methylphenidate ER (Concerta)", [T.STIMULANT],
        windows=_MORNING, avoid_after_time="14:00", stimulant=True,
    ),
    _profile(
        "modafinil", "Modafinil (Provigil)", [T.STIMULANT],
        windows=_MORNING, avoid_after_time="12:00", stimulant=True,
    ),
    _profile("bupropion", "Bupropion (Wellbutrin)", [T.STIMULANT], avoid_after_time="16:00", stimulant=True),
    # Narrow therapeutic window
    _profile("warfarin", "Warfarin (Coumadin)", [T.NARROW_TW], flexible=True),
    _profile("lithium", "Lithium", [T.NARROW_TW], with_food=True, flexible=True),
    _profile("tacrolimus", "Tacrolimus (Prograf)", [T.NARROW_TW], flexible=True),
    _profile("cyclosporine", "Cyclosporine (Neoral)", [T.NARROW_TW], flexible=True),
    _profile("digoxin", "Digoxin (Lanoxin)", [T.NARROW_TW], flexible=True),
]

SUPPLEMENT_PROFILES: List[ItemProfile] = [
    _profile("iron_supplement", "Iron", [T.IRON], kind="supplement", windows=(("07:00", "09:00"),)),
    _profile("calcium_supplement", "Calcium", [T.DIVALENT_CATION], kind="supplement", flexible=True),
    _profile("magnesium", "Magnesium", [T.DIVALENT_CATION], kind="supplement", flexible=True),
    _profile("zinc", "Zinc", [T.DIVALENT_CATION], kind="supplement", with_food=True, flexible=True),
    _profile("omega3", "Omega-3 Fish Oil", [], kind="supplement", with_food=True),
    _profile(
        "caffeine", "Caffeine", [T.CAFFEINE], kind="food",
        avoid_after_time="14:00", stimulant=True, flexible=True,
    ),
]


def builtin_profiles() -> List[ItemProfile]:
    return [*MEDICATION_PROFILES, *SUPPLEMENT_PROFILES]
