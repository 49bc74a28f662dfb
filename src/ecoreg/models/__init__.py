"""Model implementations for ecoreg.

- poisson: tree counts against elevation (GLM, direct likelihood, MCMC)
- spatial: bird presence against covariates (GLM, spatial GAM, correlograms)
"""
