"""Conversion of data frames, grouped data and statistical results."""

from .clusters import ClusterFit, MedoidFit, kmeans_as_flextable, pam_as_flextable
from .dispatch import SourceKind, as_flextable, source_kind
from .frames import dataframe_as_flextable
from .models import (
    glm_as_flextable,
    htest_as_flextable,
    lm_as_flextable,
    mixed_as_flextable,
    tidy_htest,
    tidy_mixed,
    tidy_regression,
)

__all__ = [
    "ClusterFit",
    "kmeans_as_flextable",
    "MedoidFit",
    "pam_as_flextable",
    "SourceKind",
    "as_flextable",
    "source_kind",
    "dataframe_as_flextable",
    "glm_as_flextable",
    "htest_as_flextable",
    "lm_as_flextable",
    "mixed_as_flextable",
    "tidy_htest",
    "tidy_mixed",
    "tidy_regression",
]
