import enum


class Language(str, enum.Enum):
    FR = 'FR'
    EN = 'EN'
    AR = 'AR'


class ProjectStatus(str, enum.Enum):
    DRAFT = 'DRAFT'
    ACTIVE = 'ACTIVE'
    PAUSED = 'PAUSED'
    COMPLETED = 'COMPLETED'
    CANCELLED = 'CANCELLED'


# campaigns share the project lifecycle
CampaignStatus = ProjectStatus


class ContentType(str, enum.Enum):
    ARTICLE = 'ARTICLE'
    EVENT = 'EVENT'
    PAGE = 'PAGE'


class DonationType(str, enum.Enum):
    ONE_TIME = 'ONE_TIME'
    MONTHLY = 'MONTHLY'


class PaymentMethod(str, enum.Enum):
    WAVE = 'WAVE'
    ORANGE_MONEY = 'ORANGE_MONEY'
    FREE_MONEY = 'FREE_MONEY'
    CARD = 'CARD'


class TransactionStatus(str, enum.Enum):
    PENDING = 'PENDING'
    SUCCESS = 'SUCCESS'
    FAILED = 'FAILED'
    REFUNDED = 'REFUNDED'


class OrderStatus(str, enum.Enum):
    PENDING = 'PENDING'
    CONFIRMED = 'CONFIRMED'
    PROCESSING = 'PROCESSING'
    SHIPPED = 'SHIPPED'
    DELIVERED = 'DELIVERED'
    CANCELLED = 'CANCELLED'
    REFUNDED = 'REFUNDED'


class UserRole(str, enum.Enum):
    DONOR = 'DONOR'
    MANAGER = 'MANAGER'
    ADMIN = 'ADMIN'
