from haedok.schemas.subscription import (
    BillingCycle, Subscription, SubscriptionCategory, SubscriptionStatus,
    UsageMetricType, UsageObservation,
)
from haedok.schemas.analysis import ROIAnalysis, ROIGrade, RecommendAction
from haedok.schemas.catalog import BundleDeal, Catalog, DiscountEvent, FamilyPlan, ServicePlan, ServicePreset
from haedok.schemas.savings import (
    InvestmentDataPoint, InvestmentSimulation, PurchaseAlternative, SavingsAction,
    SavingsItem, SavingsReport,
)
