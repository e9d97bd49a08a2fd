"""Global configuration: attribute names, keywords, store defaults."""

# Project-level attribute names as they appear in the host model.
ATTR_PLAN_NAME = "Project Name"
ATTR_BUILDING_NAME = "Building Name"
ATTR_SPEC_LEVEL = "Spec Level"
ATTR_CLIENT = "Client Name"
ATTR_DIVISION = "Client Division"
ATTR_SUBDIVISION = "Client Subdivision"
ATTR_GARAGE_LOADING = "Garage Loading"

# Attributes every host model defines; they are never added.
BUILT_IN_ATTRIBUTES = (ATTR_PLAN_NAME, ATTR_BUILDING_NAME)

# Attributes the "add required attributes" command makes sure exist.
REQUIRED_ATTRIBUTES = (
    ATTR_SPEC_LEVEL,
    ATTR_CLIENT,
    ATTR_DIVISION,
    ATTR_SUBDIVISION,
    ATTR_GARAGE_LOADING,
)

# Levels whose names contain any of these are not counted as stories.
NON_STORY_LEVEL_KEYWORDS = ("roof", "foundation", "base", "plate")

# Floor-area schedule lookup
FLOOR_AREA_REPORT_PREFIX = "Floor Areas"
LIVING_LABEL = "Living"
TOTAL_COVERED_LABEL = "Total Covered"
FLOOR_SECTION_MARKER = "Floor"
AREA_UNIT_SUFFIX = "SF"

# Model file extensions stripped when the title is used as a plan name
MODEL_FILE_EXTENSIONS = (".rvt", ".ifc")

# Room names excluded from living area when summing region areas
NON_LIVING_ROOM_KEYWORDS = ("garage", "porch", "patio", "deck", "attic", "crawl")

# Default SQL table and REST resource names
DEFAULT_SQL_TABLE = "HousePlans"
DEFAULT_REST_TABLE = "house_plans"

# IFC property set holding the project attributes
IFC_PROJECT_PSET = "PlanQuery_ProjectInformation"
