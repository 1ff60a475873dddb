
VERBOSE = 3

BIG_NUMBER = 1e10
TINY_NUMBER = 1e-12
MIN_LOG = -1e8 # minimal log value
MIN_BRANCH_LENGTH = 1e-8 # branches shorter than this are treated as zero length in contrasts

# discretizer codes
HIGH_CODE = 1
LOW_CODE = 0
# code rejected by the discrete model fitting routines and its replacement
RESERVED_STATE_CODE = 0
ALTERNATE_STATE_CODE = 2
MISSING_DATA = '?'

# classical statistics
ALPHA = 0.05

# continuous model optimization, rates are in units of inverse tree height
OU_ALPHA_LOWER = 1e-8
OU_ALPHA_UPPER = 100.0
EB_RATE_LOWER = -10.0
EB_RATE_UPPER = -1e-6
N_RESTARTS = 5

# discrete model optimization
MK_RATE_LOWER = 1e-8
MK_RATE_UPPER = 1e3

# stochastic mapping
MAX_REJECTION_TRIALS = 100000
ULTRAMETRIC_TOL = 1e-6
