"""Built-in plugins shipped with strata."""
