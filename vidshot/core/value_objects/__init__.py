from vidshot.core.value_objects.aspect_ratio import AspectRatio, gcd
from vidshot.core.value_objects.sampling_policy import SamplingPolicy, SamplingStrategy

__all__ = ["AspectRatio", "gcd", "SamplingPolicy", "SamplingStrategy"]
