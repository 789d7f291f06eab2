# Config module
