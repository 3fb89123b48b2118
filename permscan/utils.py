
def bigint_min_max(*values):
    "Returns (min, max) of the given integers in a single pass, exact for any magnitude"

    if not values:
        raise ValueError("bigint_min_max() needs at least one value")

    low = high = values[0]
    for value in values[1:]:
        if value < low:
            low = value
        elif value > high:
            high = value

    return low, high
