from enum import Enum

class ApplicationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    AT_CAPACITY = "at_capacity"  # Qualified, but no seats left

class Role(str, Enum):
    TOUR_PLAYER = "tour_player"
    CREATOR = "creator"
    CONTENT_CREATOR = "content_creator"
    COACH = "coach"
    FITTER = "fitter"
    INDUSTRY = "industry"
    ENTHUSIAST = "enthusiast"
    CASUAL = "casual"

class HandicapRange(str, Enum):
    SCRATCH_TO_5 = "0-5"
    SIX_TO_10 = "6-10"
    ELEVEN_TO_20 = "11-20"
    TWENTY_ONE_PLUS = "21+"

class PurchaseTimeline(str, Enum):
    IMMEDIATELY = "immediately"
    THREE_MONTHS = "3_months"
    SIX_MONTHS = "6_months"
    BROWSING = "browsing"

class CommunityInvolvement(str, Enum):
    VERY_ACTIVE = "very_active"
    SOMEWHAT_ACTIVE = "somewhat_active"
    OCCASIONAL = "occasional"
    LURKER = "lurker"

class ReferralSource(str, Enum):
    TOUR_PLAYER = "tour_player"
    EXISTING_MEMBER = "existing_member"
    INDUSTRY_CONTACT = "industry_contact"
    SOCIAL_MEDIA = "social_media"
    SEARCH = "search"
    OTHER = "other"

class GolfFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    OCCASIONALLY = "occasionally"

class BagValue(str, Enum):
    OVER_5000 = "5000+"
    FROM_3000_TO_5000 = "3000-5000"
    FROM_2000_TO_3000 = "2000-3000"
    FROM_1000_TO_2000 = "1000-2000"
    UNDER_1000 = "under_1000"

class ConfigSource(str, Enum):
    CACHE = "cache"
    DATABASE = "database"
    DEFAULT = "default"
