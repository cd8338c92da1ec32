"""Common estimator tests for sklnice using scikit-learn's parametrize_with_checks."""
from sklearn.utils.estimator_checks import parametrize_with_checks

from sklnice import KMeans


@parametrize_with_checks([KMeans()])
def test_estimators(estimator, check, request):
    check(estimator)
