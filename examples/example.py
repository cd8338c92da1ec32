import numpy as np

from sklnice import KMeans, operations

rng = np.random.RandomState(0)
X = np.vstack([
    rng.normal(loc=(0, 0), scale=0.5, size=(100, 2)),
    rng.normal(loc=(5, 5), scale=0.5, size=(60, 2)),
    rng.normal(loc=(0, 6), scale=0.5, size=(40, 2)),
])

model = KMeans(n_clusters=3, init="k-means++", verbose=1)
labels = model.fit_predict(X)
print("labels:", labels[:20])
print("centers:\n", model.cluster_centers_)
print("iterations:", model.n_iter_)
print("MLE variance:", model.compute_mle_variance(X))
print("cluster 0 size:", model.get_points_with_label(X, 0).shape[0])

# manual initialisation from chosen centers
C_init = np.array([[0.0, 0.0], [5.0, 5.0], [0.0, 6.0]])
manual = KMeans(n_clusters=3).set_init_method(C_init).fit(X)
print("manual init iterations:", manual.n_iter_)

# random bounding-box initialisation seeded from the clock
rand = KMeans(n_clusters=3).set_init_method("random").set_random(True).fit(X)
print("random init centers:\n", rand.cluster_centers_)

X_new = np.array([[0.2, -0.1], [4.8, 5.3]])
print("predict:", model.predict(X_new))
print("distances:\n", model.transform(X_new))
print("column norms of centers:", operations.norm(model.cluster_centers_, axis=0))
