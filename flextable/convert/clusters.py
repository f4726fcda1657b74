"""
Clustering results: k-means and partitioning around medoids.

scipy's :func:`scipy.cluster.vq.kmeans2` returns bare arrays;
:class:`ClusterFit` keeps them together with the clustered data and
derives the usual sums of squares.  :func:`kmeans_as_flextable` shows, for
each cluster, its within sum of squares, its size and its center.

:class:`MedoidFit` describes a partition around medoids, observations
that act as cluster centers.  Dissimilarities come from
:func:`scipy.spatial.distance.pdist`; :func:`pam_as_flextable` shows the
medoids and the per-cluster dissimilarity statistics.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional

import numpy as np
import pandas as pd
from scipy.spatial.distance import pdist, squareform  # type: ignore[import-not-found]

from ..config import DEFAULTS, FlextableDefaults
from ..errors import InvalidInputError
from ..formatting import format_fun
from ..grouping.grouped_data import coerce_table
from ..reshape.tabulator import tabulation_as_flextable, tabulator, tabulator_colnames
from ..table import (
    FlexTable,
    add_footer_lines,
    align,
    append_chunks,
    as_paragraph,
    autofit,
    bold,
    compose,
    hline,
)

__all__ = ["ClusterFit", "MedoidFit", "PAM_STATS", "kmeans_as_flextable", "pam_as_flextable"]

PAM_STATS = ("size", "max.diss", "avg.diss", "diameter", "separation", "avg.width")


@dataclass(frozen=True)
class ClusterFit:
    """
    A partition of observations around cluster centers.

    Attributes
    ----------
    data : DataFrame
        Clustered observations (numeric columns only).
    centers : ndarray, shape (k, p)
        Cluster centers, one row per cluster.
    labels : ndarray, shape (n,)
        0‑based cluster index of each observation.
    iterations : int, optional
        Number of iterations run by the algorithm, when known.
    """

    data: pd.DataFrame
    centers: np.ndarray
    labels: np.ndarray
    iterations: Optional[int] = None

    @classmethod
    def from_kmeans2(
        cls, data: Any, centroids: Any, labels: Any, iterations: Optional[int] = None
    ) -> "ClusterFit":
        """Wrap the ``(centroids, labels)`` pair returned by ``kmeans2``."""
        frame = coerce_table(data)
        centers = np.asarray(centroids, dtype=float)
        labels = np.asarray(labels, dtype=int)
        if centers.ndim != 2 or centers.shape[1] != frame.shape[1]:
            raise InvalidInputError(
                f"centroids must have shape (k, {frame.shape[1]}), got {centers.shape}"
            )
        if labels.shape != (len(frame),):
            raise InvalidInputError("one label per observation is required")
        if labels.size and (labels.min() < 0 or labels.max() >= len(centers)):
            raise InvalidInputError("labels must index the centroids")
        return cls(data=frame, centers=centers, labels=labels, iterations=iterations)

    @property
    def k(self) -> int:
        return len(self.centers)

    @property
    def size(self) -> np.ndarray:
        return np.bincount(self.labels, minlength=self.k)

    @property
    def withinss(self) -> np.ndarray:
        x = self.data.to_numpy(dtype=float)
        sq = ((x - self.centers[self.labels]) ** 2).sum(axis=1)
        return np.bincount(self.labels, weights=sq, minlength=self.k)

    @property
    def tot_withinss(self) -> float:
        return float(self.withinss.sum())

    @property
    def totss(self) -> float:
        x = self.data.to_numpy(dtype=float)
        return float(((x - x.mean(axis=0)) ** 2).sum())

    @property
    def betweenss(self) -> float:
        return self.totss - self.tot_withinss

    def tidy(self) -> pd.DataFrame:
        """One row per cluster: centers, size and within sum of squares."""
        out = pd.DataFrame(self.centers, columns=list(self.data.columns))
        out["size"] = self.size.astype(float)
        out["withinss"] = self.withinss
        out.insert(0, "cluster", [str(k + 1) for k in range(self.k)])
        return out


def kmeans_as_flextable(
    x: ClusterFit, digits: int = 4, *, config: FlextableDefaults = DEFAULTS
) -> FlexTable:
    """
    Table of a k‑means fit: one column per cluster.

    Rows give the within‑cluster sum of squares, the size and then the
    center coordinates (marked with ``*``); the footer lists the total,
    within and between sums of squares, their ratio and the number of
    iterations.
    """
    clusters = x.tidy()
    variables = [c for c in clusters.columns if c not in ("cluster", "size", "withinss")]
    keys = ["withinss", "size"] + variables
    key_type = ["Statistics", "Statistics"] + ["Centers"] * len(variables)

    long = clusters.melt(
        id_vars="cluster", value_vars=keys, var_name="variable", value_name="value"
    )
    ct = tabulator(
        long,
        rows=["variable"],
        columns=["cluster"],
        value="value",
        hidden_data=pd.DataFrame({"variable": keys, "key_type": key_type}),
    )
    ft = tabulation_as_flextable(ct, config=config)

    def is_size(d: pd.DataFrame) -> pd.Series:
        return d["variable"] == "size"

    def is_center(d: pd.DataFrame) -> pd.Series:
        return d["key_type"] == "Centers"

    for col in tabulator_colnames(ct):
        ft = compose(
            ft, i=is_size, j=col,
            value=lambda row, col=col: as_paragraph(f"{row[col]:.0f}"),
        )
        ft = compose(
            ft, i=is_center, j=col,
            value=lambda row, col=col: as_paragraph(
                format_fun(row[col], digits=digits, config=config)
            ),
        )
    ft = append_chunks(ft, "*", i=is_center, j=0)
    ft = hline(ft, i=is_size)

    ratio = x.betweenss / x.totss if x.totss else np.nan
    w_labels: List[str] = [
        f"Total sum of squares: {format_fun(x.totss, config=config)}",
        f"Total within-cluster sum of squares: {format_fun(x.tot_withinss, config=config)}",
        f"Total between-cluster sum of squares: {format_fun(x.betweenss, config=config)}",
        f"BSS/TSS ratio: {format_fun(ratio * 100, config=config, suffix='%')}",
    ]
    if x.iterations is not None:
        w_labels.append(f"Number of iterations: {x.iterations}")
    ft = add_footer_lines(ft, ["(*) Centers"] + w_labels)
    ft = autofit(ft, part=["header", "body"])
    ft = align(ft, part="footer", align="right")
    ft = align(ft, i=0, part="footer", align="left")
    return bold(ft, part="header")


@dataclass(frozen=True)
class MedoidFit:
    """
    A partition of observations around medoids.

    Attributes
    ----------
    data : DataFrame
        Clustered observations (numeric columns only).
    medoids : ndarray, shape (k,)
        Row position in ``data`` of each cluster's medoid.
    labels : ndarray, shape (n,)
        0‑based cluster index of each observation.
    dissimilarity : ndarray, shape (n, n)
        Pairwise dissimilarities between observations.
    """

    data: pd.DataFrame
    medoids: np.ndarray
    labels: np.ndarray
    dissimilarity: np.ndarray

    @classmethod
    def from_medoids(
        cls,
        data: Any,
        medoids: Any,
        labels: Any = None,
        metric: str = "euclidean",
    ) -> "MedoidFit":
        """
        Build a fit from medoid positions.

        Parameters
        ----------
        data : DataFrame, 2‑D ndarray or mapping
        medoids : sequence of int
            Row positions of the medoids, one per cluster.
        labels : sequence of int, optional
            Cluster of each observation; defaults to the closest medoid.
        metric : str, default "euclidean"
            Any metric accepted by :func:`scipy.spatial.distance.pdist`.
        """
        frame = coerce_table(data)
        n = len(frame)
        medoids = np.asarray(medoids, dtype=int)
        if medoids.ndim != 1 or len(medoids) < 2:
            raise InvalidInputError("at least two medoids are required")
        if len(set(medoids.tolist())) != len(medoids):
            raise InvalidInputError("medoids must be distinct observations")
        if medoids.min() < 0 or medoids.max() >= n:
            raise InvalidInputError(f"medoids must be row positions in [0, {n})")
        diss = squareform(pdist(frame.to_numpy(dtype=float), metric=metric))
        k = len(medoids)
        if labels is None:
            labels = np.argmin(diss[:, medoids], axis=1)
            labels[medoids] = np.arange(k)
        else:
            labels = np.asarray(labels, dtype=int)
            if labels.shape != (n,):
                raise InvalidInputError("one label per observation is required")
            if labels.min() < 0 or labels.max() >= k:
                raise InvalidInputError("labels must index the medoids")
            if not np.array_equal(labels[medoids], np.arange(k)):
                raise InvalidInputError("each medoid must belong to its own cluster")
        return cls(data=frame, medoids=medoids, labels=labels, dissimilarity=diss)

    @property
    def k(self) -> int:
        return len(self.medoids)

    @property
    def size(self) -> np.ndarray:
        return np.bincount(self.labels, minlength=self.k)

    @property
    def silhouette(self) -> np.ndarray:
        """Silhouette width of each observation; 0 in singleton clusters."""
        d, lab, n = self.dissimilarity, self.labels, len(self.labels)
        sizes = self.size
        sums = np.column_stack([d[:, lab == c].sum(axis=1) for c in range(self.k)])
        own = sizes[lab]
        a = sums[np.arange(n), lab] / np.maximum(own - 1, 1)
        with np.errstate(divide="ignore", invalid="ignore"):
            means = np.where(sizes > 0, sums / sizes, np.inf)
        means[np.arange(n), lab] = np.inf
        b = means.min(axis=1)
        denom = np.maximum(a, b)
        out = np.zeros(n)
        np.divide(b - a, denom, out=out, where=(own > 1) & (denom > 0))
        return out

    @property
    def avg_silhouette_width(self) -> float:
        return float(self.silhouette.mean())

    def cluster_info(self) -> pd.DataFrame:
        """Per-cluster statistics, one row per cluster, in ``PAM_STATS`` order."""
        d, lab = self.dissimilarity, self.labels
        width = self.silhouette
        rows = []
        for c, m in enumerate(self.medoids):
            members = np.flatnonzero(lab == c)
            others = np.flatnonzero(lab != c)
            to_medoid = d[members, m]
            rows.append(
                {
                    "size": float(len(members)),
                    "max.diss": float(to_medoid.max()),
                    "avg.diss": float(to_medoid.mean()),
                    "diameter": float(d[np.ix_(members, members)].max()),
                    "separation": float(d[np.ix_(members, others)].min()),
                    "avg.width": float(width[members].mean()),
                }
            )
        return pd.DataFrame(rows, columns=list(PAM_STATS))

    def tidy(self) -> pd.DataFrame:
        """One row per cluster: medoid coordinates then cluster statistics."""
        out = self.data.iloc[self.medoids].reset_index(drop=True).astype(float)
        out = pd.concat([out, self.cluster_info()], axis=1)
        out.insert(0, "cluster", [str(k + 1) for k in range(self.k)])
        return out


def pam_as_flextable(
    x: MedoidFit, digits: int = 4, *, config: FlextableDefaults = DEFAULTS
) -> FlexTable:
    """
    Table of a partition around medoids: one column per cluster.

    Rows give the medoid coordinates (marked with ``*``) followed by the
    size, maximal and average dissimilarity to the medoid, diameter,
    separation and average silhouette width of each cluster.  The footer
    gives the average silhouette width of the whole partition.
    """
    clusters = x.tidy()
    variables = [c for c in clusters.columns if c not in ("cluster",) + PAM_STATS]
    keys = variables + list(PAM_STATS)
    key_type = ["Centers"] * len(variables) + ["Statistics"] * len(PAM_STATS)

    long = clusters.melt(
        id_vars="cluster", value_vars=keys, var_name="variable", value_name="value"
    )
    ct = tabulator(
        long,
        rows=["variable"],
        columns=["cluster"],
        value="value",
        hidden_data=pd.DataFrame({"variable": keys, "key_type": key_type}),
    )
    ft = tabulation_as_flextable(ct, config=config)

    def is_size(d: pd.DataFrame) -> pd.Series:
        return d["variable"] == "size"

    def is_center(d: pd.DataFrame) -> pd.Series:
        return d["key_type"] == "Centers"

    for col in tabulator_colnames(ct):
        ft = compose(
            ft, i=is_size, j=col,
            value=lambda row, col=col: as_paragraph(f"{row[col]:.0f}"),
        )
        ft = compose(
            ft, i=is_center, j=col,
            value=lambda row, col=col: as_paragraph(
                format_fun(row[col], digits=digits, config=config)
            ),
        )
    ft = append_chunks(ft, "*", i=is_center, j=0)
    ft = hline(ft, i=lambda d: d["variable"] == "avg.width")
    ft = add_footer_lines(ft, "(*) Centers")
    ft = autofit(ft, part=["header", "body"])
    width = format_fun(x.avg_silhouette_width, digits=4, config=config)
    ft = add_footer_lines(ft, f"The average silhouette width is {width}")
    ft = align(ft, j=0, part="footer", align="left")
    return bold(ft, part="header")
