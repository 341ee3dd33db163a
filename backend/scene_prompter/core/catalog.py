# Fixed option lists offered to the author.
# Enum values are the labels the editor shows; the composer lower-cases them
# when it writes them into the Indonesian narrative.

from enum import Enum
from typing import Dict, Optional


class CharacterKind(str, Enum):
    HUMAN = "human"
    QUADRUPED_ANIMAL = "animal4"
    BIPED_ANIMAL = "animal2"
    FANTASY_CREATURE = "fantasy"


# Used inside suggestion instructions ("... yang berjenis <label>")
KIND_LABELS: Dict[CharacterKind, str] = {
    CharacterKind.HUMAN: "manusia",
    CharacterKind.QUADRUPED_ANIMAL: "hewan berkaki empat",
    CharacterKind.BIPED_ANIMAL: "hewan berjalan dengan dua kaki",
    CharacterKind.FANTASY_CREATURE: "makhluk fantasi",
}


class DialogueType(str, Enum):
    QUESTION = "Ask a question"
    ANSWER = "Give an answer"
    ADDRESS_AUDIENCE = "Berbicara ke Audiens"

    @property
    def takes_target(self) -> bool:
        return self in (DialogueType.QUESTION, DialogueType.ANSWER)


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    NON_BINARY = "Non-binary"
    OTHER = "Other"


class FaceShape(str, Enum):
    ROUND = "Round"
    OVAL = "Oval"
    SQUARE = "Square"
    HEART = "Heart"
    DIAMOND = "Diamond"


class SkinColor(str, Enum):
    FAIR = "Fair"
    LIGHT = "Light"
    MEDIUM = "Medium"
    OLIVE = "Olive"
    DARK = "Dark"


class BodyTypePosture(str, Enum):
    SLIM = "Slim"
    ATHLETIC = "Athletic"
    AVERAGE = "Average"
    CURVY = "Curvy"
    MUSCULAR = "Muscular"
    ELDERLY = "Elderly"
    SLOUCHING = "Slouching"
    UPRIGHT = "Upright"


class AnimalBodyShape(str, Enum):
    SLIM = "Slim"
    CHUBBY_ROUND = "Chubby Round"
    MUSCULAR = "Muscular"
    GRACEFUL = "Graceful"
    STOCKY = "Stocky"


class FaceFeature(str, Enum):
    CHUBBY = "Chubby"
    CUTE = "Cute"
    SHARP = "Sharp"
    ANGULAR = "Angular"
    SOFT = "Soft"


class EarFeature(str, Enum):
    POINTY = "Pointy"
    ROUNDED = "Rounded"
    FLOPPY = "Floppy"
    LARGE = "Large"
    SMALL = "Small"


class FurCharacteristic(str, Enum):
    SOFT = "Soft"
    FLUFFY = "Fluffy"
    SHORT = "Short"
    LONG = "Long"
    WIRY = "Wiry"
    SMOOTH = "Smooth"
    PATTERNED = "Patterned"


class Expression(str, Enum):
    HAPPY = "Happy"
    ANGRY = "Angry"
    SAD = "Sad"
    CONFUSED = "Confused"
    SURPRISED = "Surprised"
    NEUTRAL = "Neutral"
    EXCITED = "Excited"
    WORRIED = "Worried"
    DETERMINED = "Determined"


class TimeOfDay(str, Enum):
    MORNING = "Morning"
    AFTERNOON = "Afternoon"
    EVENING = "Evening"
    NIGHT = "Night"
    GOLDEN_HOUR = "Golden Hour"
    BLUE_HOUR = "Blue Hour"
    DAWN = "Dawn"
    DUSK = "Dusk"


class Lighting(str, Enum):
    SOFT = "Soft lighting"
    HARSH = "Harsh light"
    BACKLIGHT = "Backlight"
    CINEMATIC = "Cinematic lighting"
    NATURAL = "Natural light"
    DRAMATIC = "Dramatic lighting"
    STUDIO = "Studio lighting"
    AMBIENT = "Ambient light"


class VideoMood(str, Enum):
    AESTHETIC = "Aesthetic"
    CHEERFUL = "Cheerful"
    COZY = "Cozy"
    DARK = "Dark"
    MYSTERIOUS = "Mysterious"
    DRAMATIC = "Dramatic"
    MAGICAL = "Magical"
    ENERGETIC = "Energetic"
    CALM = "Calm"
    SUSPENSEFUL = "Suspenseful"
    WHIMSICAL = "Whimsical"
    GRITTY = "Gritty"
    DREAMY = "Dreamy"


class CameraMotion(str, Enum):
    STATIC_SHOT = "Static Shot"
    PAN_LEFT = "Pan Left"
    PAN_RIGHT = "Pan Right"
    TILT_UP = "Tilt Up"
    TILT_DOWN = "Tilt Down"
    ZOOM_IN = "Zoom In"
    ZOOM_OUT = "Zoom Out"
    DOLLY_IN = "Dolly In"
    DOLLY_OUT = "Dolly Out"
    DOLLY_LEFT = "Dolly Left"
    DOLLY_RIGHT = "Dolly Right"
    PEDESTAL_UP = "Pedestal Up"
    PEDESTAL_DOWN = "Pedestal Down"
    TRUCK_LEFT = "Truck Left"
    TRUCK_RIGHT = "Truck Right"
    ARC_LEFT = "Arc Left"
    ARC_RIGHT = "Arc Right"
    WHIP_PAN = "Whip Pan"
    CRASH_ZOOM = "Crash Zoom"
    BULLET_TIME = "Bullet Time"
    FPV_DRONE = "FPV Drone"
    AERIAL_PERSPECTIVE = "Aerial Perspective"
    TRACKING_SHOT = "Tracking Shot"
    ORBIT_360 = "360 Orbit"
    CRANE_UP = "Crane Up"
    CRANE_DOWN = "Crane Down"
    DOLLY_ZOOM = "Dolly Zoom"
    ROBO_ARM = "Robo Arm"
    SUPER_DOLLY_IN = "Super Dolly In"
    FOCUS_CHANGE = "Focus Change"
    THROUGH_OBJECT = "Through Object"
    LAZY_SUSAN = "Lazy Susan"
    ACTION_RUN = "Action Run"
    HANDHELD = "Handheld"
    DUTCH_ANGLE = "Dutch Angle"
    CAR_GRIP = "Car Grip"
    HYPERLAPSE = "Hyperlapse"
    LOW_SHUTTER = "Low Shutter"
    FISHEYE = "Fisheye"


# The enum value is the stored key; the narrative uses the Indonesian label.
CAMERA_MOTION_LABELS: Dict[CameraMotion, str] = {
    CameraMotion.STATIC_SHOT: "Bidikan Statis",
    CameraMotion.PAN_LEFT: "Geser Kiri",
    CameraMotion.PAN_RIGHT: "Geser Kanan",
    CameraMotion.TILT_UP: "Miring ke Atas",
    CameraMotion.TILT_DOWN: "Miring ke Bawah",
    CameraMotion.ZOOM_IN: "Perbesar",
    CameraMotion.ZOOM_OUT: "Perkecil",
    CameraMotion.DOLLY_IN: "Gerakan Dolly Masuk",
    CameraMotion.DOLLY_OUT: "Gerakan Dolly Keluar",
    CameraMotion.DOLLY_LEFT: "Gerakan Dolly Kiri",
    CameraMotion.DOLLY_RIGHT: "Gerakan Dolly Kanan",
    CameraMotion.PEDESTAL_UP: "Angkat Kamera ke Atas",
    CameraMotion.PEDESTAL_DOWN: "Turunkan Kamera ke Bawah",
    CameraMotion.TRUCK_LEFT: "Gerakan Truk Kiri",
    CameraMotion.TRUCK_RIGHT: "Gerakan Truk Kanan",
    CameraMotion.ARC_LEFT: "Busur Kiri",
    CameraMotion.ARC_RIGHT: "Busur Kanan",
    CameraMotion.WHIP_PAN: "Geser Cepat",
    CameraMotion.CRASH_ZOOM: "Perbesar Mendadak",
    CameraMotion.BULLET_TIME: "Waktu Peluru",
    CameraMotion.FPV_DRONE: "Drone Sudut Pandang Orang Pertama",
    CameraMotion.AERIAL_PERSPECTIVE: "Perspektif Udara",
    CameraMotion.TRACKING_SHOT: "Bidikan Mengikuti",
    CameraMotion.ORBIT_360: "Orbit 360 Derajat",
    CameraMotion.CRANE_UP: "Angkat Derek ke Atas",
    CameraMotion.CRANE_DOWN: "Turunkan Derek ke Bawah",
    CameraMotion.DOLLY_ZOOM: "Efek Vertigo",
    CameraMotion.ROBO_ARM: "Lengan Robot",
    CameraMotion.SUPER_DOLLY_IN: "Gerakan Dolly Sangat Dekat",
    CameraMotion.FOCUS_CHANGE: "Perubahan Fokus",
    CameraMotion.THROUGH_OBJECT: "Melalui Objek",
    CameraMotion.LAZY_SUSAN: "Putaran Lambat",
    CameraMotion.ACTION_RUN: "Lari Aksi",
    CameraMotion.HANDHELD: "Genggam Tangan",
    CameraMotion.DUTCH_ANGLE: "Sudut Belanda",
    CameraMotion.CAR_GRIP: "Genggam Mobil",
    CameraMotion.HYPERLAPSE: "Hiperlapse",
    CameraMotion.LOW_SHUTTER: "Rana Lambat",
    CameraMotion.FISHEYE: "Mata Ikan",
}


def camera_motion_label(motion) -> Optional[str]:
    """Indonesian display label of a camera motion, or None when unknown."""
    try:
        return CAMERA_MOTION_LABELS.get(CameraMotion(motion))
    except ValueError:
        return None


class VisualTechnique(str, Enum):
    TWO_D = "2D"
    TWO_AND_HALF_D = "2.5D"
    THREE_D = "3D"
    STOP_MOTION = "Stop-motion"
    CLAYMATION = "Claymation"
    PIXEL_ART = "Pixel Art"
    ROTOSCOPING = "Rotoscoping"


class ArtisticStyle(str, Enum):
    CINEMATIC = "Cinematic"
    REALISTIC = "Realistic"
    SEMI_REALISTIC = "Semi-realistic"
    CARTOON = "Cartoon"
    ANIME = "Anime"
    SILHOUETTE = "Silhouette"
    LINE_ART = "Line Art"
    FLAT_DESIGN = "Flat Design"
    PAPERCUT = "Papercut Style"
    SKETCH_DOODLE = "Sketch/Doodle Style"
    MINIMALIST = "Minimalist"
    SURREALISTIC = "Surrealistic"
    VAPORWAVE = "Vaporwave"
    CYBERPUNK = "Cyberpunk"
    RETRO_FUTURISM = "Retro Futurism"
    NOIR = "Noir"
    STEAMPUNK = "Steampunk"


class StudioBrandStyle(str, Enum):
    DISNEY = "Disney Style"
    PIXAR = "Pixar Style"
    DREAMWORKS = "DreamWorks Style"
    ILLUMINATION = "Illumination Style"
    GHIBLI = "Ghibli Style"
    LAIKA = "Laika Style"
    NICKELODEON = "Nickelodeon Style"
    CARTOON_NETWORK = "Cartoon Network Style"
    WEBTOON = "Webtoon Style"
    MARVEL_COMIC = "Marvel/Comic Book Style"
    ROBLOX_LOW_POLY = "Roblox/Low Poly Style"


VISUAL_STYLE_FAMILIES = {
    "visual_technique": VisualTechnique,
    "artistic_style": ArtisticStyle,
    "studio_brand_style": StudioBrandStyle,
}


def parse_visual_style(value):
    """Resolve a raw style label against the three families (they never overlap)."""
    if isinstance(value, (VisualTechnique, ArtisticStyle, StudioBrandStyle)):
        return value
    for family in VISUAL_STYLE_FAMILIES.values():
        try:
            return family(value)
        except ValueError:
            continue
    raise ValueError(f"Unknown visual style: {value!r}")


class AgeBracket(str, Enum):
    BABY = "Bayi (0–2 tahun)"
    TODDLER = "Balita (3–5 tahun)"
    CHILD = "Anak Kecil (6–8 tahun)"
    PRETEEN = "Pra-Remaja (9–12 tahun)"
    EARLY_TEEN = "Remaja Awal (13–15 tahun)"
    TEEN = "Remaja (16–18 tahun)"
    YOUNG_ADULT = "Dewasa Muda (19–30 tahun)"
    ADULT = "Dewasa (31–50 tahun)"
    ELDER = "Lansia (50+ tahun)"
    WISE_ELDER = "Karakter Tua & Bijak (Fabel)"


# Age Descriptor Table (bipedal animals only), in display order
AGE_DESCRIPTORS: Dict[AgeBracket, str] = {
    AgeBracket.BABY: "baby-like, tiny proportions, big eyes, oversized head",
    AgeBracket.TODDLER: "toddler-style, playful and chubby, short legs",
    AgeBracket.CHILD: "childlike, energetic, round face, cheerful",
    AgeBracket.PRETEEN: "youthful, slightly mischievous, small and lanky",
    AgeBracket.EARLY_TEEN: "awkward teen, slim build, growing up phase",
    AgeBracket.TEEN: "confident teenager, casual style, expressive",
    AgeBracket.YOUNG_ADULT: "young adult, well-proportioned, stylish",
    AgeBracket.ADULT: "mature character, balanced, calm expression",
    AgeBracket.ELDER: "elderly, gray fur, wrinkles, gentle demeanor",
    AgeBracket.WISE_ELDER: "ancient creature, long beard, wise eyes, walking cane",
}


def parse_age_bracket(value) -> AgeBracket:
    """Accept a bracket, its label, its enum name, or its descriptor phrase."""
    if isinstance(value, AgeBracket):
        return value
    for bracket, descriptor in AGE_DESCRIPTORS.items():
        if value in (bracket.value, bracket.name, descriptor):
            return bracket
    raise ValueError(f"Unknown age bracket: {value!r}")


def age_descriptor(bracket: Optional[AgeBracket]) -> Optional[str]:
    if bracket is None:
        return None
    return AGE_DESCRIPTORS.get(bracket)


def catalog_options() -> Dict[str, object]:
    """Every option list, in the shape the editor renders dropdowns from."""
    return {
        "character_kinds": [k.value for k in CharacterKind],
        "dialogue_types": [t.value for t in DialogueType],
        "gender": [g.value for g in Gender],
        "face_shape": [f.value for f in FaceShape],
        "skin_color": [s.value for s in SkinColor],
        "body_type_posture": [b.value for b in BodyTypePosture],
        "animal_age": [{"label": b.value, "value": d} for b, d in AGE_DESCRIPTORS.items()],
        "animal_body_shape": [b.value for b in AnimalBodyShape],
        "face_feature": [f.value for f in FaceFeature],
        "ear_feature": [e.value for e in EarFeature],
        "fur_characteristic": [f.value for f in FurCharacteristic],
        "expression": [e.value for e in Expression],
        "time_of_day": [t.value for t in TimeOfDay],
        "camera_motion": [{"en": motion.value, "id": label} for motion, label in CAMERA_MOTION_LABELS.items()],
        "lighting": [l.value for l in Lighting],
        "video_mood": [m.value for m in VideoMood],
        "visual_styles": {name: [s.value for s in family] for name, family in VISUAL_STYLE_FAMILIES.items()},
    }
