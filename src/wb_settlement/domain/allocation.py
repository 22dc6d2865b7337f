"""Largest-remainder allocation of an integer amount across weighted claims."""


def allocate_pro_rata(total: int, weights: list[tuple[str, int]]) -> dict[str, int]:
    """Split ``total`` cents across ``weights`` in proportion, summing exactly to ``total``.

    Each key first gets floor(total * w / W); the leftover cents go one each
    to the keys with the largest fractional remainders. Ties go to the
    earlier key in ``weights``, so callers pass claims in placement order.
    """
    if total < 0:
        raise ValueError(f"total must be >= 0, got {total}")
    weight_sum = sum(w for _, w in weights)
    if weight_sum <= 0:
        if total:
            raise ValueError("cannot allocate a non-zero total across zero weight")
        return {key: 0 for key, _ in weights}
    if any(w < 0 for _, w in weights):
        raise ValueError("weights must be >= 0")

    shares: dict[str, int] = {}
    remainders: list[tuple[int, int, str]] = []
    for index, (key, weight) in enumerate(weights):
        share, remainder = divmod(total * weight, weight_sum)
        shares[key] = share
        remainders.append((-remainder, index, key))

    leftover = total - sum(shares.values())
    for _, _, key in sorted(remainders)[:leftover]:
        shares[key] += 1
    return shares
