'''
This file contains some constants and configuration parameters
'''

MAX_SLOTS = 100_000  # simulated horizon. The number of slots could be unbounded,
                     # we assume a run never needs more than this to converge.

MAX_PKT_SIZE = 100
MAX_NODE_COUNT = 1000
MAX_CW_SIZE = 512

SAMPLING_INTERVAL = 1000  # slots between two efficiency samples
STABILITY_THRESHOLD = 0.0005  # 0.05% on the efficiency delta

# seed of the convergence sample before the first measurement
INITIAL_EFFICIENCY = 0.000001
INITIAL_DELTA = 1.0

BACKOFF_STREAM = "contention/backoff"
