"""Built-in system crops seeded into the store at startup."""

from __future__ import annotations

from typing import Dict, List, Tuple


_COLUMNS = (
    "name",
    "category",
    "row_spacing",
    "plant_spacing",
    "soil_ph",
    "days_to_maturity",
    "planting_depth",
    "sun_requirement",
    "water_requirement",
    "common_pests",
    "common_diseases",
    "fertilizer_schedule",
    "harvest_tips",
)

_ROWS: Tuple[tuple, ...] = (
    ("Tomato", "vegetables", "36-48", "24-36", "6.0-6.8", 70, "1/4", "Full Sun", "High",
     "Hornworms, Whiteflies, Aphids", "Early Blight, Late Blight",
     "Every 2-3 weeks with balanced fertilizer",
     "Pick when fully colored but still slightly soft"),
    ("Pepper", "vegetables", "18-24", "18-24", "6.0-6.8", 60, "1/8", "Full Sun", "Medium",
     "Aphids, Spider Mites, Thrips", "Bacterial Spot", "Every 3-4 weeks",
     "Harvest when peppers reach desired color"),
    ("Lettuce", "vegetables", "12-18", "6-12", "6.0-7.0", 45, "1/4", "Partial Shade", "Medium",
     "Slugs, Aphids, Leaf Miners", "Powdery Mildew, Downy Mildew",
     "Every 3-4 weeks with nitrogen-rich", "Harvest outer leaves regularly"),
    ("Carrot", "vegetables", "12-18", "2-3", "6.0-6.8", 70, "1/4", "Full Sun", "Medium",
     "Rust Flies, Carrot Weevils", "Cavity Spot, Cercospora Leaf Spot",
     "Monthly with balanced fertilizer", "Pull when shoulders are 1/2 inch wide"),
    ("Broccoli", "vegetables", "24-36", "18-24", "6.0-7.0", 55, "1/4", "Full Sun", "Medium",
     "Cabbage Worms, Loopers", "Clubroot, Black Rot", "Every 2-3 weeks with nitrogen",
     "Cut central head when tight, side shoots follow"),
    ("Cabbage", "vegetables", "18-30", "12-24", "6.0-7.5", 70, "1/4", "Full Sun", "Medium",
     "Cabbage Worms, Cabbage Loopers", "Clubroot, Black Rot", "Every 3-4 weeks",
     "Cut when head is firm and dense"),
    ("Kale", "vegetables", "18-24", "12-18", "6.0-7.0", 55, "1/4", "Full Sun", "Medium",
     "Cabbage Worms, Harlequin Bugs", "Powdery Mildew, Downy Mildew",
     "Every 3-4 weeks with nitrogen", "Harvest outer leaves, plant continues growing"),
    ("Spinach", "vegetables", "8-12", "4-6", "6.5-7.0", 40, "1/2", "Partial Shade", "Medium",
     "Aphids, Flea Beetles, Leaf Miners", "Downy Mildew, Fusarium Wilt",
     "Every 4 weeks with nitrogen", "Harvest when leaves are 3-6 inches long"),
    ("Swiss Chard", "vegetables", "12-18", "6-12", "6.0-7.5", 50, "1/2", "Full Sun", "Medium",
     "Leaf Miners, Slugs", "Cercospora Leaf Spot", "Every 3-4 weeks",
     "Harvest outer leaves, plant continues growing"),
    ("Cucumber", "vegetables", "12-18", "12-24", "6.0-7.0", 55, "1", "Full Sun", "High",
     "Cucumber Beetles, Squash Bugs", "Powdery Mildew, Angular Leaf Spot",
     "Every 2-3 weeks with balanced", "Pick when 6-8 inches and green"),
    ("Zucchini", "vegetables", "36-48", "24-36", "6.0-7.0", 45, "1", "Full Sun", "High",
     "Squash Bugs, Vine Borers", "Powdery Mildew", "Every 2-3 weeks with nitrogen",
     "Harvest at 6-8 inches for best tenderness"),
    ("Bean", "vegetables", "18-24", "4-6", "6.0-7.0", 55, "1", "Full Sun", "Medium",
     "Bean Beetles, Aphids", "Bacterial Blight, Rust",
     "Light nitrogen, let nitrogen-fixing work", "Pick pods when young and tender"),
    ("Onion", "vegetables", "12-18", "4-6", "6.0-7.0", 100, "1/2", "Full Sun", "Medium",
     "Onion Maggots, Thrips", "Pink Root, Fusarium Rot", "Every 3-4 weeks with nitrogen",
     "Harvest when tops die back and dry"),
    ("Garlic", "vegetables", "12-18", "4-6", "6.0-7.0", 210, "2", "Full Sun", "Low",
     "Onion Maggots, Thrips", "Fusarium Rot, White Rot", "Spring application with nitrogen",
     "Harvest when tops dry down completely"),
    ("Peach", "fruits", "12-20", "12-20", "6.0-7.0", 100, "18-24 inches", "Full Sun", "Medium",
     "Peach Tree Borers, Japanese Beetles", "Brown Rot, Leaf Curl",
     "Spring and early summer with balanced", "Harvest when fully colored and fragrant"),
    ("Plum", "fruits", "12-18", "12-18", "6.0-8.0", 90, "18-24 inches", "Full Sun", "Medium",
     "Japanese Beetles, Codling Moths", "Black Knot, Brown Rot",
     "Spring application with balanced", "Harvest when skin is fully colored"),
    ("Apple", "fruits", "15-20", "15-20", "6.0-7.0", 365, "18-24 inches", "Full Sun", "Medium",
     "Codling Moths, Apple Maggots", "Apple Scab, Powdery Mildew",
     "Spring application with balanced", "Harvest when fully colored and slightly soft"),
    ("Basil", "herbs", "12-18", "6-12", "6.0-7.0", 50, "1/4", "Full Sun", "Medium",
     "Japanese Beetles, Slugs", "Downy Mildew, Fusarium Wilt", "Every 4 weeks with balanced",
     "Pinch off flower buds to encourage growth"),
    ("Parsley", "herbs", "12-18", "6-12", "6.0-7.0", 70, "1/4", "Partial Shade", "Medium",
     "Swallowtail Caterpillars, Slugs", "Leaf Spot, Downy Mildew",
     "Every 4 weeks with nitrogen", "Harvest outer stems as plant grows"),
    ("Oregano", "herbs", "12-18", "12-18", "6.0-7.0", 90, "1/8", "Full Sun", "Low",
     "Spider Mites, Slugs", "Powdery Mildew", "Light, every 6-8 weeks",
     "Harvest sprigs as needed, more after flowering"),
    ("Thyme", "herbs", "12-18", "12-18", "6.0-8.0", 90, "1/8", "Full Sun", "Low",
     "Spider Mites, Slugs", "Root Rot, Powdery Mildew", "Light, every 6-8 weeks",
     "Harvest sprigs as needed"),
    ("Marigold", "flowers", "12-18", "8-12", "6.0-7.0", 50, "1/4", "Full Sun", "Low",
     "Spider Mites, Slugs", "Powdery Mildew, Leaf Spot", "Light, every 4-6 weeks",
     "Deadhead regularly to encourage blooming"),
    ("Zinnia", "flowers", "12-18", "8-12", "6.0-7.0", 60, "1/4", "Full Sun", "Medium",
     "Spider Mites, Slugs", "Powdery Mildew, Leaf Spot", "Every 4 weeks with balanced",
     "Cut flowers early in morning, remove lower leaves"),
    ("Sunflower", "flowers", "24-36", "12-24", "6.0-7.5", 85, "1", "Full Sun", "Medium",
     "Striped Cucumber Beetle, Sunflower Maggot", "Powdery Mildew, Rust",
     "Every 4-6 weeks with balanced", "Cut flowers in early morning when petals open"),
)


def system_crop_rows() -> List[Dict[str, object]]:
    return [dict(zip(_COLUMNS, row)) for row in _ROWS]
