"""
Clustering of overlapping cascade candidates.

A cascade fires on many neighbouring windows around one object. Candidates
are grouped greedily: each unassigned candidate seeds a cluster and absorbs
every later unassigned candidate overlapping it by more than the IoU
threshold. A cluster reports the mean position and size of its members and
the sum of their scores, so a well-supported object scores higher than a
single stray window.
"""

from typing import List, Tuple

from models.detection import Detection, DetectionSet

DEFAULT_IOU_THRESHOLD = 0.2


def calculate_iou(
    bbox1: Tuple[float, float, float, float],
    bbox2: Tuple[float, float, float, float]
) -> float:
    """
    Calculate Intersection over Union (IoU) between two bounding boxes.
    
    Args:
        bbox1: First bounding box (x1, y1, x2, y2)
        bbox2: Second bounding box (x1, y1, x2, y2)
        
    Returns:
        IoU value between 0 and 1
    """
    x1_1, y1_1, x2_1, y2_1 = bbox1
    x1_2, y1_2, x2_2, y2_2 = bbox2

    x1_i = max(x1_1, x1_2)
    y1_i = max(y1_1, y1_2)
    x2_i = min(x2_1, x2_2)
    y2_i = min(y2_1, y2_2)

    if x2_i <= x1_i or y2_i <= y1_i:
        return 0.0

    intersection = (x2_i - x1_i) * (y2_i - y1_i)

    area1 = (x2_1 - x1_1) * (y2_1 - y1_1)
    area2 = (x2_2 - x1_2) * (y2_2 - y1_2)
    union = area1 + area2 - intersection

    if union == 0:
        return 0.0

    return intersection / union


def cluster_detections(
    detections: List[Detection],
    iou_threshold: float = DEFAULT_IOU_THRESHOLD,
) -> DetectionSet:
    """
    Merge overlapping candidates into one detection per cluster.
    
    Output order follows the order of each cluster's first member.
    """
    assigned = [False] * len(detections)
    clusters: DetectionSet = []

    for i, seed in enumerate(detections):
        if assigned[i]:
            continue

        rows = cols = scales = 0
        score = 0.0
        members = 0
        for j in range(i, len(detections)):
            if assigned[j]:
                continue
            other = detections[j]
            if j != i and calculate_iou(seed.bbox, other.bbox) <= iou_threshold:
                continue
            assigned[j] = True
            rows += other.row
            cols += other.col
            scales += other.scale
            score += other.score
            members += 1

        clusters.append(
            Detection(
                row=int(rows / members),
                col=int(cols / members),
                scale=int(scales / members),
                score=score,
            )
        )

    return clusters
