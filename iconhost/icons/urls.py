class UrlBuilder:
    """Build public URLs for stored icons.

    `cdn` mode points at jsDelivr's GitHub mirror of the repository,
    `local` mode at the `/icons` static mount of this service.
    """

    def __init__(self, cdn_base: str, repo_owner: str, repo_name: str, branch: str = "main", mode: str = "cdn"):
        self.cdn_base = cdn_base.rstrip("/")
        self.repo_owner = repo_owner
        self.repo_name = repo_name
        self.branch = branch
        self.mode = mode

    def __call__(self, category: str, file_name: str) -> str:
        path = f"icons/{category}/{file_name}"
        if self.mode == "local":
            return f"/{path}"
        return f"{self.cdn_base}/{self.repo_owner}/{self.repo_name}@{self.branch}/{path}"
