"""
Lane Layout Service

Lays out temporally overlapping appointments side by side for calendar views.
Greedy interval coloring in ascending start order: on interval graphs this
uses exactly as many lanes as the largest set of simultaneous appointments,
up to the display cap.
"""

from typing import Any, Dict, Iterable, List, Optional

from .config import SchedulingConfig, resolve_config
from .records import intervals_overlap, record_to_dict, valid_intervals


def layout_lanes(
	appointments: Iterable[Any],
	max_lanes: Optional[int] = None,
	config: Optional[SchedulingConfig] = None
) -> List[Dict[str, Any]]:
	"""
	Assigns a (lane, total_lanes) pair to every appointment of a display window.

	Args:
		appointments: appointments of one window (day, room column, month cell);
			they need not share a room, overlap is computed on time only
		max_lanes: lane cap; defaults to config.max_display_lanes
		config: hospital clock and default cap

	Returns:
		list[dict]: copies of the input records, ordered by start, each with
			"lane" (>= 0) and "total_lanes" (>= 1) added

	Algorithm:
		1. Stable sort by start (ties keep input order)
		2. For each appointment, find placed appointments that overlap it
		3. lane = smallest lane not used by them
		4. total = min(max(lane + 1, their totals), cap)
		5. Propagate total to the overlapping placed appointments
		6. Clamp lane to total - 1 when more than `cap` overlap
		7. Give every transitive cluster the largest total of its members

	Malformed records (no timestamps, end <= start) are logged and left out.
	"""
	config = resolve_config(config)
	cap = max_lanes if max_lanes is not None else config.max_display_lanes
	cap = max(cap, 1)

	intervals = valid_intervals(appointments, config.tz, "Lane layout")
	# sorted() is stable, equal starts keep input order
	intervals = sorted(intervals, key=lambda item: item[1])

	placed: List[Dict[str, Any]] = []

	for record, start, end in intervals:
		overlapping = [
			item for item in placed
			if intervals_overlap(start, end, item["start"], item["end"])
		]

		used_lanes = {item["lane"] for item in overlapping}
		lane = 0
		while lane in used_lanes:
			lane += 1

		total_lanes = max([lane + 1] + [item["total_lanes"] for item in overlapping])
		total_lanes = min(total_lanes, cap)

		for item in overlapping:
			item["total_lanes"] = total_lanes

		placed.append({
			"record": record,
			"start": start,
			"end": end,
			"lane": min(lane, total_lanes - 1),
			"total_lanes": total_lanes
		})

	_share_cluster_totals(placed)

	return [
		record_to_dict(item["record"], lane=item["lane"], total_lanes=item["total_lanes"])
		for item in placed
	]


def get_max_concurrency(
	appointments: Iterable[Any],
	config: Optional[SchedulingConfig] = None
) -> int:
	"""
	Largest number of appointments running at the same instant.

	Sweep over start/end events; ends sort before starts at the same instant
	so touching appointments are not counted together.
	"""
	config = resolve_config(config)
	events = []
	for _record, start, end in valid_intervals(appointments, config.tz, "Concurrency"):
		events.append((start, 1))
		events.append((end, -1))

	events.sort(key=lambda event: (event[0], event[1]))

	current = peak = 0
	for _instant, delta in events:
		current += delta
		peak = max(peak, current)

	return peak


def _share_cluster_totals(placed: List[Dict[str, Any]]) -> None:
	"""
	Propagates the largest total_lanes across each maximal cluster.

	`placed` is sorted by start, so a cluster ends where the next start is
	not before the running end of the cluster.
	"""
	cluster: List[Dict[str, Any]] = []
	cluster_end = None

	for item in placed:
		if cluster and item["start"] >= cluster_end:
			_apply_cluster_total(cluster)
			cluster = []
			cluster_end = None

		cluster.append(item)
		if cluster_end is None or item["end"] > cluster_end:
			cluster_end = item["end"]

	if cluster:
		_apply_cluster_total(cluster)


def _apply_cluster_total(cluster: List[Dict[str, Any]]) -> None:
	total_lanes = max(item["total_lanes"] for item in cluster)
	for item in cluster:
		item["total_lanes"] = total_lanes
