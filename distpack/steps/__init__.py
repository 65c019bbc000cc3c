from .step_10_checkout import CheckoutStep
from .step_20_build import BuildStep
from .step_30_stage import StageStep
from .step_40_package import PackageStep
from .step_50_publish import PublishArtifactsStep

__all__ = [
    "CheckoutStep",
    "BuildStep",
    "StageStep",
    "PackageStep",
    "PublishArtifactsStep",
]
