"""X 팔로워/팔로잉 수를 구글 시트 일보에 기록하는 배치."""
