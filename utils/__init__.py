# Utils module
