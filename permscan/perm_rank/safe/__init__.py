from .safe_functions import *
